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

"""Public API return types for versiongate.

Every update check produces exactly one Outcome:

- NoUpdate: The application is up to date (or every tier is ineligible).
- UpdateAvailable: A newer version exists; ``mandatory`` tells whether the
    user must upgrade before continuing.
- CheckFailed: The check could not be completed. ``kind`` is
    "wrong_version" for malformed versions or documents without a platform
    section, "unknown" for every other failure.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values. Each outcome owns its own metadata dict.

Example:
    Branching on an outcome:
        ```python
        from versiongate.results import CheckFailed, UpdateAvailable

        outcome = coordinator.check(loader)
        if isinstance(outcome, UpdateAvailable) and outcome.mandatory:
            block_until_updated(outcome.target_version)
        elif isinstance(outcome, CheckFailed):
            print(f"Update check failed: {outcome.kind}")
        ```

    Callback-style delivery:
        ```python
        from versiongate.results import deliver_outcome

        deliver_outcome(outcome, my_callback)
        ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol

ErrorKind = Literal["wrong_version", "unknown"]


@dataclass(frozen=True)
class NoUpdate:
    """No update is needed.

    Attributes:
        metadata: Copy of the document's metadata.
    """

    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateAvailable:
    """A newer version exists.

    Attributes:
        target_version: Version string to offer to the user.
        mandatory: True if the running version is below the minimum version.
        metadata: Copy of the document's metadata.
    """

    target_version: str
    mandatory: bool
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CheckFailed:
    """The check ended in an error.

    Attributes:
        kind: "wrong_version" or "unknown".
        message: Human-readable description of the underlying error.
        metadata: Always empty; present so every outcome has the attribute.
    """

    kind: ErrorKind
    message: str = ""
    metadata: dict[str, str] = field(default_factory=dict)


Outcome = NoUpdate | UpdateAvailable | CheckFailed


class UpdateCallback(Protocol):
    """Receiver for callback-style outcome delivery.

    Exactly one of the three methods is called per check.
    """

    def on_new_update(
        self, version: str, mandatory: bool, metadata: dict[str, str]
    ) -> None:
        ...

    def on_no_update(self, metadata: dict[str, str]) -> None:
        ...

    def on_error(self, kind: ErrorKind) -> None:
        ...


def deliver_outcome(outcome: Outcome, callback: UpdateCallback) -> None:
    """Call the one callback method matching ``outcome``.

    Raises:
        TypeError: If outcome is not one of the Outcome variants.
    """
    if isinstance(outcome, UpdateAvailable):
        callback.on_new_update(
            outcome.target_version, outcome.mandatory, dict(outcome.metadata)
        )
    elif isinstance(outcome, NoUpdate):
        callback.on_no_update(dict(outcome.metadata))
    elif isinstance(outcome, CheckFailed):
        callback.on_error(outcome.kind)
    else:
        raise TypeError(f"Not an update check outcome: {outcome!r}")


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating an update document.

    Attributes:
        status: Validation status ("valid" or "invalid").
        errors: List of error messages (empty if valid).
        warnings: List of warning messages.
        platform: Platform section that was validated.
        document_path: String path to the validated document.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    platform: str
    document_path: str
