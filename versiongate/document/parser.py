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

"""JSON update document parser.

Turns a raw update document into an UpdateConfiguration for one platform.

Document Format:

    {
      "ios": { ... },
      "android": {
        "minimum_version": "1.2.3",
        "minimum_version_min_sdk": 15,
        "latest_version": {
          "version": "2.4.5",
          "notification_type": "ONCE",
          "min_sdk": 18
        }
      },
      "meta": {"key1": "value1"}
    }

Field Rules:

- The platform section is looked up by the platform identity ("android" by
    default). Without it the document is structurally invalid.
- minimum_version / minimum_version_min_sdk describe the minimum tier.
- latest_version describes the optional tier; its "version" key is required.
- notification_type: "ALWAYS" (recurring) or "ONCE" (once_only),
    case-insensitive. Missing means the default policy; unknown values are
    treated as recurring.
- min_sdk values must be non-negative integers. Missing means 0.
- meta is optional; its values are converted to strings.

Error Handling:

- DocumentSyntaxError: Raw text is not JSON.
- StructuralError: Not a JSON object, no platform section, or a field of the
    wrong type.
- InvalidVersionFormat: A tier version is not N.N.N(.N)*.

Example:
    ```python
    from versiongate.document import parse_document

    config = parse_document(raw_text, platform="android")
    print(config.optional.version)  # 2.4.5
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
import json
from typing import Any

from versiongate.exceptions import DocumentSyntaxError, StructuralError
from versiongate.logging import Logger, get_global_logger
from versiongate.versioning import SemanticVersion

from .model import (
    DEFAULT_NOTIFICATION_POLICY,
    DEFAULT_PLATFORM_LEVEL,
    MinimumTier,
    NotificationPolicy,
    OptionalTier,
    UpdateConfiguration,
)

DEFAULT_PLATFORM = "android"

# Wire values of notification_type
_NOTIFICATION_TYPES: dict[str, NotificationPolicy] = {
    "always": "recurring",
    "once": "once_only",
}


def decode_document(raw: str | bytes | Mapping[str, Any]) -> Any:
    """Decode raw document text into Python objects.

    Mappings are passed through untouched so callers that already hold a
    decoded document can skip the JSON step.

    Raises:
        DocumentSyntaxError: If the text is not valid JSON.
    """
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as err:
            raise DocumentSyntaxError(f"Document is not UTF-8 text: {err}") from err
    try:
        return json.loads(raw)
    except json.JSONDecodeError as err:
        raise DocumentSyntaxError(f"Document is not valid JSON: {err}") from err


def _platform_level(section: Mapping[str, Any], key: str) -> int:
    value = section.get(key)
    if value is None:
        return DEFAULT_PLATFORM_LEVEL
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise StructuralError(f"{key!r} must be an integer, got {value!r}")
    if value < 0:
        raise StructuralError(f"{key!r} must not be negative, got {value}")
    return value


def _version(value: Any, key: str) -> SemanticVersion:
    if not isinstance(value, str):
        raise StructuralError(f"{key!r} must be a string, got {value!r}")
    return SemanticVersion.parse(value)


def _notification_policy(value: Any, logger: Logger) -> NotificationPolicy:
    if value is None:
        return DEFAULT_NOTIFICATION_POLICY
    if not isinstance(value, str):
        raise StructuralError(f"'notification_type' must be a string, got {value!r}")
    policy = _NOTIFICATION_TYPES.get(value.strip().lower())
    if policy is None:
        logger.verbose(
            "PARSER", f"Unknown notification_type {value!r}, treating as ALWAYS"
        )
        return "recurring"
    return policy


def _parse_minimum(section: Mapping[str, Any]) -> MinimumTier | None:
    raw_version = section.get("minimum_version")
    if raw_version is None:
        return None
    return MinimumTier(
        version=_version(raw_version, "minimum_version"),
        required_platform_level=_platform_level(section, "minimum_version_min_sdk"),
    )


def _parse_optional(
    section: Mapping[str, Any], logger: Logger
) -> OptionalTier | None:
    latest = section.get("latest_version")
    if latest is None:
        return None
    if not isinstance(latest, Mapping):
        raise StructuralError(
            f"'latest_version' must be an object, got {type(latest).__name__}"
        )
    if "version" not in latest:
        raise StructuralError("'latest_version' is missing its 'version' field")
    return OptionalTier(
        version=_version(latest["version"], "latest_version.version"),
        required_platform_level=_platform_level(latest, "min_sdk"),
        notification_policy=_notification_policy(
            latest.get("notification_type"), logger
        ),
    )


def _parse_metadata(document: Mapping[str, Any]) -> dict[str, str]:
    meta = document.get("meta")
    if meta is None:
        return {}
    if not isinstance(meta, Mapping):
        raise StructuralError(f"'meta' must be an object, got {type(meta).__name__}")
    return {str(k): str(v) for k, v in meta.items()}


def parse_document(
    raw: str | bytes | Mapping[str, Any],
    platform: str = DEFAULT_PLATFORM,
    *,
    logger: Logger | None = None,
) -> UpdateConfiguration:
    """Parse a raw update document into an UpdateConfiguration.

    Args:
        raw: Document text (JSON), UTF-8 bytes, or an already decoded mapping.
        platform: Key of the platform section to read (e.g. "android").
        logger: Logger for diagnostics. Defaults to the global logger.

    Returns:
        The resolved configuration. Tiers the document does not describe are
        None; no values are inferred for them.

    Raises:
        DocumentSyntaxError: If the text is not valid JSON.
        StructuralError: If the document has no section for ``platform`` or a
            field has the wrong type.
        InvalidVersionFormat: If a tier version string is malformed.
    """
    if logger is None:
        logger = get_global_logger()

    document = decode_document(raw)
    if not isinstance(document, Mapping):
        raise StructuralError(
            f"Document must be a JSON object, got {type(document).__name__}"
        )

    section = document.get(platform)
    if section is None:
        raise StructuralError(f"Document has no {platform!r} section")
    if not isinstance(section, Mapping):
        raise StructuralError(f"{platform!r} section must be a JSON object")

    minimum = _parse_minimum(section)
    optional = _parse_optional(section, logger)
    metadata = _parse_metadata(document)

    logger.debug(
        "PARSER",
        f"Parsed {platform!r}: minimum={minimum.version if minimum else None}, "
        f"optional={optional.version if optional else None}, "
        f"meta keys={sorted(metadata)}",
    )

    return UpdateConfiguration(minimum=minimum, optional=optional, metadata=metadata)
