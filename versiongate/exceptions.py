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

"""Exception hierarchy for versiongate.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- ConfigError: Settings-related errors (YAML parse, missing settings)
- DocumentError: Update document errors (bad version strings, missing
    platform section, unparsable text)
- FetchError: Document retrieval errors (missing file, HTTP failures)
- LedgerError: Notification ledger read/write errors
- CheckInProgressError: A second concurrent check for the same application

All exceptions inherit from VersionGateError, allowing users to catch all
versiongate errors with a single except clause if needed.

Note:
    The coordinator never lets these escape from a check. They are mapped
    to a CheckFailed outcome: InvalidVersionFormat, StructuralError and
    DocumentSyntaxError become "wrong_version", everything else becomes
    "unknown".

Example:
    Catching specific error types:
        ```python
        from versiongate.document import parse_document
        from versiongate.exceptions import InvalidVersionFormat, StructuralError

        try:
            config = parse_document(raw, platform="android")
        except InvalidVersionFormat as e:
            print(f"Bad version: {e}")
        except StructuralError as e:
            print(f"Bad document: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "VersionGateError",
    "ConfigError",
    "DocumentError",
    "InvalidVersionFormat",
    "StructuralError",
    "DocumentSyntaxError",
    "FetchError",
    "NetworkError",
    "LedgerError",
    "CheckInProgressError",
]


class VersionGateError(Exception):
    """Base exception for all versiongate errors."""

    pass


class ConfigError(VersionGateError):
    """Raised for settings-related errors.

    This exception is raised when there are problems with:

    - YAML parsing of a settings file (syntax errors, empty file)
    - A settings file whose top level is not a mapping
    - Required settings that are missing (app id, current version, source)
    """

    pass


class DocumentError(VersionGateError):
    """Base class for problems with an update configuration document."""

    pass


class InvalidVersionFormat(DocumentError, ValueError):
    """Raised when a version string is not of the form N.N.N(.N)*.

    Applies to the running application's own version as well as to the
    minimum and optional tier versions found in a document.

    Example:
        ```python
        from versiongate.versioning import SemanticVersion

        try:
            SemanticVersion.parse("2.0")
        except InvalidVersionFormat as e:
            print(e)  # version '2.0' needs at least 3 components
        ```
    """

    pass


class StructuralError(DocumentError):
    """Raised when a document does not describe the target platform.

    This covers a missing platform section, a document that is not a JSON
    object, and fields with the wrong type (e.g. a non-integer min_sdk).
    """

    pass


class DocumentSyntaxError(DocumentError):
    """Raised when the raw document text cannot be decoded as JSON."""

    pass


class FetchError(VersionGateError):
    """Raised when a loader cannot retrieve the raw document."""

    pass


class NetworkError(FetchError):
    """Raised for HTTP failures (connection errors, timeouts, bad status)."""

    pass


class LedgerError(VersionGateError):
    """Raised when the notification ledger cannot be read or written."""

    pass


class CheckInProgressError(VersionGateError):
    """Raised when a check is started while another one for the same
    application identity is still outstanding."""

    pass
