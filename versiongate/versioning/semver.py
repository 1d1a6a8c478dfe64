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

"""Strict dotted-numeric version parsing and comparison.

This module is format-agnostic: it does NOT fetch or read documents. It only
parses and orders version strings of the form ``N.N.N(.N)*``.

Rules:

- At least three dot-separated components.
- Every component is one or more ASCII digits (no sign, no whitespace, no
  empty component, no prerelease or build suffix).
- Comparison is numeric, left to right. The shorter version is padded with
  zeros, so "1.2.3" and "1.2.3.0" are equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re

from versiongate.exceptions import InvalidVersionFormat

MIN_COMPONENTS = 3

_COMPONENT = re.compile(r"[0-9]+")


def _pad_equal(
    a: tuple[int, ...], b: tuple[int, ...]
) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Pad tuples with zeros so they align for element-wise comparison."""
    n = max(len(a), len(b))
    return a + (0,) * (n - len(a)), b + (0,) * (n - len(b))


def _strip_trailing_zeros(nums: tuple[int, ...]) -> tuple[int, ...]:
    end = len(nums)
    while end > 0 and nums[end - 1] == 0:
        end -= 1
    return nums[:end]


def _ints_from_text(text: str) -> tuple[int, ...]:
    """Split a version string into integers, rejecting anything malformed."""
    if not isinstance(text, str) or not text:
        raise InvalidVersionFormat(f"version must be a non-empty string: {text!r}")
    parts = text.split(".")
    for p in parts:
        if not _COMPONENT.fullmatch(p):
            raise InvalidVersionFormat(
                f"non-numeric or empty version component {p!r} in {text!r}"
            )
    if len(parts) < MIN_COMPONENTS:
        raise InvalidVersionFormat(
            f"version {text!r} needs at least {MIN_COMPONENTS} components"
        )
    return tuple(int(p) for p in parts)


@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """An immutable, totally ordered dotted-numeric version.

    Attributes:
        text: The original version string, kept verbatim for exact string
            comparisons (the notification ledger stores this form).
        components: Parsed integer components.

    Example:
        ```python
        v = SemanticVersion.parse("2.4.5")
        assert v > SemanticVersion.parse("2.4.4")
        assert v == SemanticVersion.parse("2.4.5.0")
        ```
    """

    text: str
    components: tuple[int, ...] = field(repr=False)

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse a version string.

        Raises:
            InvalidVersionFormat: If text is empty, has a non-numeric or empty
                component, or has fewer than three components.
        """
        return cls(text=text, components=_ints_from_text(text))

    def compare(self, other: SemanticVersion) -> int:
        """Return -1, 0 or 1 as self is less than, equal to or greater than other."""
        a, b = _pad_equal(self.components, other.components)
        return (a > b) - (a < b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.compare(other) >= 0

    def __hash__(self) -> int:
        # Must agree with zero-padded equality
        return hash(_strip_trailing_zeros(self.components))

    def __str__(self) -> str:
        return self.text


def _coerce(value: str | SemanticVersion) -> SemanticVersion:
    if isinstance(value, SemanticVersion):
        return value
    return SemanticVersion.parse(value)


def compare_versions(a: str | SemanticVersion, b: str | SemanticVersion) -> int:
    """Compare two versions.

    Returns -1 if a < b, 0 if equal, 1 if a > b.

    Raises:
        InvalidVersionFormat: If either string is not a valid version.
    """
    return _coerce(a).compare(_coerce(b))


def is_less_than(a: str | SemanticVersion, b: str | SemanticVersion) -> bool:
    """Return True iff a is strictly lower than b. Equal versions are not less."""
    return compare_versions(a, b) < 0


def is_valid_version(text: str) -> bool:
    """Return True if text parses as a version."""
    try:
        _ints_from_text(text)
    except InvalidVersionFormat:
        return False
    return True
