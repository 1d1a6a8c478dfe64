# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Notification ledger for versiongate.

Persists the last optional-update version surfaced to the user for each
application identity, so "once_only" optional updates are not shown twice.

Public API:

- NotificationLedger: Protocol with get(app_id) and set(app_id, version)
- JsonFileLedger: Ledger stored in a JSON file
- InMemoryLedger: Ledger stored in memory
- load_ledger / save_ledger: Low-level JSON file helpers

Example:
    from pathlib import Path
    from versiongate.ledger import JsonFileLedger

    ledger = JsonFileLedger(Path("state/notifications.json"))
    ledger.set("com.example.app", "2.4.5")
"""

from .tracker import (
    InMemoryLedger,
    JsonFileLedger,
    NotificationLedger,
    create_default_ledger,
    load_ledger,
    save_ledger,
)

__all__ = [
    "InMemoryLedger",
    "JsonFileLedger",
    "NotificationLedger",
    "create_default_ledger",
    "load_ledger",
    "save_ledger",
]
