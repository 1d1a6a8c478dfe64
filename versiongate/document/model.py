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

"""Resolved update configuration model.

An UpdateConfiguration is built once per check by the document parser and is
never mutated afterwards. It only records what the document says; whether the
running application is behind a tier is decided by the engine at decision
time (see versiongate.policy.engine).

Defaults applied when a document leaves a field out live here:

- DEFAULT_PLATFORM_LEVEL: 0, meaning the tier applies on every platform level.
- DEFAULT_NOTIFICATION_POLICY: "recurring", meaning an optional update is
    reported on every check.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

from versiongate.versioning import SemanticVersion

NotificationPolicy = Literal["recurring", "once_only"]

DEFAULT_PLATFORM_LEVEL = 0
DEFAULT_NOTIFICATION_POLICY: NotificationPolicy = "recurring"


@dataclass(frozen=True)
class MinimumTier:
    """Lowest version the application may run.

    Attributes:
        version: Minimum version.
        required_platform_level: Lowest platform API level at which the
            requirement applies. 0 means always applicable.
    """

    version: SemanticVersion
    required_platform_level: int = DEFAULT_PLATFORM_LEVEL


@dataclass(frozen=True)
class OptionalTier:
    """Latest available version, offered as a non-blocking update.

    Attributes:
        version: Latest version.
        required_platform_level: Lowest platform API level able to run it.
            0 means always applicable.
        notification_policy: "recurring" (report on every check) or
            "once_only" (report once per version string).
    """

    version: SemanticVersion
    required_platform_level: int = DEFAULT_PLATFORM_LEVEL
    notification_policy: NotificationPolicy = DEFAULT_NOTIFICATION_POLICY


VersionTier = MinimumTier | OptionalTier


@dataclass(frozen=True)
class UpdateConfiguration:
    """Minimum tier, optional tier and free-form metadata from one document.

    Either tier may be absent. No ordering between the two tiers is enforced
    here. ``metadata`` is a read-only view over a private copy of the mapping
    passed in, so later changes to the caller's dict are not observed.
    """

    minimum: MinimumTier | None = None
    optional: OptionalTier | None = None
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = MappingProxyType({str(k): str(v) for k, v in self.metadata.items()})
        object.__setattr__(self, "metadata", frozen)

    def metadata_copy(self) -> dict[str, str]:
        """Return a fresh, mutable copy of the metadata."""
        return dict(self.metadata)
