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

"""Update configuration documents.

Modules:

model : module
    Immutable UpdateConfiguration, MinimumTier and OptionalTier.
parser : module
    JSON wire format parser producing an UpdateConfiguration.

Example:
    from versiongate.document import parse_document

    config = parse_document('{"android": {"minimum_version": "1.2.3"}}')
    print(config.minimum.version)  # 1.2.3
"""

from .model import (
    DEFAULT_NOTIFICATION_POLICY,
    DEFAULT_PLATFORM_LEVEL,
    MinimumTier,
    NotificationPolicy,
    OptionalTier,
    UpdateConfiguration,
    VersionTier,
)
from .parser import DEFAULT_PLATFORM, decode_document, parse_document

__all__ = [
    "DEFAULT_NOTIFICATION_POLICY",
    "DEFAULT_PLATFORM",
    "DEFAULT_PLATFORM_LEVEL",
    "MinimumTier",
    "NotificationPolicy",
    "OptionalTier",
    "UpdateConfiguration",
    "VersionTier",
    "decode_document",
    "parse_document",
]
