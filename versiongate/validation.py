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

"""Update document validation module.

This module checks an update document file without running a check:
no network calls, no ledger access. This is useful for quick feedback while
editing a document and in CI/CD pipelines before publishing it.

Validation Checks:

- File exists and is readable UTF-8 text
- JSON syntax is valid and the top level is an object
- Platform section exists and is an object
- minimum_version and latest_version.version are N.N.N(.N)* strings
- min_sdk values are non-negative integers
- notification_type is ALWAYS or ONCE (anything else is a warning)
- meta is an object

Example:
    Validate a document and handle results:
        ```python
        from pathlib import Path
        from versiongate.validation import validate_document

        result = validate_document(Path("update.json"), platform="android")
        if result.status == "valid":
            print("Document is valid")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from versiongate.document.parser import DEFAULT_PLATFORM
from versiongate.logging import get_global_logger
from versiongate.results import ValidationResult
from versiongate.versioning import compare_versions, is_valid_version

__all__ = ["validate_document"]

_KNOWN_NOTIFICATION_TYPES = ("ALWAYS", "ONCE")


def _check_level(container: dict[str, Any], key: str, label: str) -> str | None:
    if key not in container or container[key] is None:
        return None
    value = container[key]
    if isinstance(value, bool) or not isinstance(value, int):
        return f"{label}: Must be an integer, got {value!r}"
    if value < 0:
        return f"{label}: Must not be negative, got {value}"
    return None


def _check_version(value: Any, label: str) -> str | None:
    if not isinstance(value, str):
        return f"{label}: Must be a string, got {value!r}"
    if not is_valid_version(value):
        return f"{label}: Invalid version format: {value!r} (expected N.N.N)"
    return None


def validate_document(
    document_path: Path, platform: str = DEFAULT_PLATFORM
) -> ValidationResult:
    """Validate an update document file without running a check.

    Does NOT:

    - Fetch anything over the network
    - Read or write the notification ledger
    - Compare against a running application version

    Args:
        document_path: Path to the JSON update document.
        platform: Platform section to validate. Default is "android".

    Returns:
        ValidationResult with status "valid" or "invalid". Document problems
        are reported in ``errors`` and never raised.
    """
    logger = get_global_logger()
    errors: list[str] = []
    warnings: list[str] = []

    def _result() -> ValidationResult:
        status = "valid" if len(errors) == 0 else "invalid"
        return ValidationResult(
            status=status,
            errors=errors,
            warnings=warnings,
            platform=platform,
            document_path=str(document_path),
        )

    logger.verbose("VALIDATION", f"Validating document: {document_path}")

    if not document_path.exists():
        errors.append(f"Document file not found: {document_path}")
        return _result()

    try:
        text = document_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        errors.append(f"Failed to read document file: {err}")
        return _result()

    try:
        document = json.loads(text)
    except json.JSONDecodeError as err:
        errors.append(f"Invalid JSON syntax: {err}")
        return _result()

    if not isinstance(document, dict):
        errors.append("Document must be a JSON object")
        return _result()

    logger.verbose("VALIDATION", "[OK] JSON syntax is valid")

    # meta is shared by all platforms
    meta = document.get("meta")
    if meta is not None and not isinstance(meta, dict):
        errors.append("meta: Must be an object")

    if platform not in document or document[platform] is None:
        errors.append(f"Missing platform section: {platform}")
        return _result()

    section = document[platform]
    if not isinstance(section, dict):
        errors.append(f"{platform}: Must be an object")
        return _result()

    minimum_text: str | None = None
    if section.get("minimum_version") is not None:
        error = _check_version(
            section["minimum_version"], f"{platform}.minimum_version"
        )
        if error:
            errors.append(error)
        else:
            minimum_text = section["minimum_version"]
            logger.verbose("VALIDATION", f"[OK] Minimum version: {minimum_text}")

    error = _check_level(
        section, "minimum_version_min_sdk", f"{platform}.minimum_version_min_sdk"
    )
    if error:
        errors.append(error)

    optional_text: str | None = None
    latest = section.get("latest_version")
    if latest is not None:
        prefix = f"{platform}.latest_version"
        if not isinstance(latest, dict):
            errors.append(f"{prefix}: Must be an object")
        else:
            if "version" not in latest:
                errors.append(f"{prefix}: Missing required field: version")
            else:
                error = _check_version(latest["version"], f"{prefix}.version")
                if error:
                    errors.append(error)
                else:
                    optional_text = latest["version"]
                    logger.verbose(
                        "VALIDATION", f"[OK] Latest version: {optional_text}"
                    )

            error = _check_level(latest, "min_sdk", f"{prefix}.min_sdk")
            if error:
                errors.append(error)

            notification_type = latest.get("notification_type")
            if notification_type is not None:
                if not isinstance(notification_type, str):
                    errors.append(f"{prefix}.notification_type: Must be a string")
                elif notification_type.strip().upper() not in _KNOWN_NOTIFICATION_TYPES:
                    warnings.append(
                        f"{prefix}.notification_type: Unknown value "
                        f"{notification_type!r} will be treated as ALWAYS"
                    )

    if section.get("minimum_version") is None and latest is None:
        warnings.append(
            f"{platform}: Neither minimum_version nor latest_version is set; "
            "checks will never report an update"
        )

    if minimum_text and optional_text:
        if compare_versions(optional_text, minimum_text) < 0:
            warnings.append(
                f"{platform}: latest_version {optional_text} is lower than "
                f"minimum_version {minimum_text}"
            )

    result = _result()
    if result.status == "valid":
        logger.verbose("VALIDATION", "[OK] Document is valid!")
    else:
        logger.verbose("VALIDATION", f"[ERROR] Document has {len(errors)} error(s)")
    return result
