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

"""Running application's own version and platform level."""

from __future__ import annotations

from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version

from versiongate.exceptions import ConfigError


@dataclass(frozen=True)
class PlatformInfo:
    """Version and platform API level of the running application.

    Attributes:
        version: Application version string. Not validated here; the engine
            reports a malformed value as a "wrong_version" error.
        platform_level: Platform API level (e.g. Android SDK_INT). 0 when the
            platform has no such notion.
    """

    version: str
    platform_level: int = 0

    @classmethod
    def from_distribution(
        cls, distribution: str, platform_level: int = 0
    ) -> PlatformInfo:
        """Build from the version of an installed Python distribution.

        Raises:
            ConfigError: If the distribution is not installed.
        """
        try:
            return cls(version=version(distribution), platform_level=platform_level)
        except PackageNotFoundError as err:
            raise ConfigError(f"Distribution not installed: {distribution!r}") from err
