"""
Version parsing and comparison utilities for versiongate.

Modules
-------
semver : module
    Strict dotted-numeric versions (N.N.N(.N)*) with zero-padded ordering.

Public API
----------
SemanticVersion : dataclass
    Immutable parsed version, totally ordered, keeps its original text.
compare_versions : function
    Compare two version strings, returning -1, 0, or 1.
is_less_than : function
    Check whether one version is strictly lower than another.
is_valid_version : function
    Check whether a string is a well-formed version.

Examples
--------
    >>> from versiongate.versioning import compare_versions, is_less_than
    >>> compare_versions("1.10.0", "1.9.0")
    1
    >>> compare_versions("1.2.3", "1.2.3.0")
    0
    >>> is_less_than("2.4.5", "2.4.5")
    False

Notes
-----
- Anything other than digits and dots is rejected, including "v" prefixes
  and prerelease tags such as "1.0.0-rc.1".
- Fewer than three components ("2.0") is an error, not "2.0.0".
"""

from .semver import (
    SemanticVersion,
    compare_versions,
    is_less_than,
    is_valid_version,
)

__all__ = [
    "SemanticVersion",
    "compare_versions",
    "is_less_than",
    "is_valid_version",
]
