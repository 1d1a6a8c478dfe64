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

"""Update decision policy for versiongate.

Modules:

engine : module
    Mandatory / optional / no-update decision with platform-level gating and
    optional-update deduplication.

Public API:

decide : function
    Produce the outcome for one check.
is_tier_eligible : function
    Check whether a tier applies at a platform level.
should_record_notification : function
    Check whether an outcome must be written to the ledger.

Example:
    from versiongate.policy import decide

    outcome = decide(
        current_version="1.0.0",
        platform_level=16,
        config=config,
    )
    print(outcome)  # UpdateAvailable(target_version='2.4.5', mandatory=True, ...)
"""

from .engine import decide, is_tier_eligible, should_record_notification

__all__ = ["decide", "is_tier_eligible", "should_record_notification"]
