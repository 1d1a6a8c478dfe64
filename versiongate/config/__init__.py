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

"""Settings loading for versiongate.

Settings are layered: built-in defaults, then an optional YAML settings
file, then explicit overrides (typically CLI flags). Dicts are merged
recursively; lists and scalars are replaced (last wins). Relative paths in a
settings file are resolved against the file's directory.

Public API:

- load_settings: Load and merge settings
- require_setting: Fetch a required setting by dotted key
- DEFAULT_SETTINGS: Built-in defaults

Example:
    from pathlib import Path
    from versiongate.config import load_settings

    settings = load_settings(Path("versiongate.yaml"), {"platform_level": 21})
    print(settings["ledger"]["path"])
"""

from .loader import DEFAULT_SETTINGS, load_settings, require_setting

__all__ = ["DEFAULT_SETTINGS", "load_settings", "require_setting"]
