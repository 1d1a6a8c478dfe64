"""
Settings loading and merging for versiongate.

Settings describe how an update check is run: where the document lives,
which platform section to read, which application identity to track, and
where the notification ledger is stored.

Settings Layers
---------------
1. **Built-in defaults** (DEFAULT_SETTINGS)
2. **Settings file** (YAML, optional)
3. **Overrides** (usually CLI flags; None values are ignored)

Merge Behavior
--------------
The loader performs deep merging with "last wins" semantics:
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists**: Completely replaced (NOT appended/extended)
  - **Scalars**: Overwritten (strings, numbers, booleans)

Path Resolution
---------------
Relative paths in a settings file are resolved against the SETTINGS FILE
location. Currently resolved:
  - ledger.path
  - document.source (only when it is not an http(s) URL)

Example Settings File
---------------------
    app_id: com.example.app
    platform: android
    platform_level: 16
    current_version: 2.0.0
    document:
      source: https://example.com/update.json
      timeout: 10
      headers:
        Authorization: "Bearer ${UPDATE_TOKEN}"
    ledger:
      path: state/notifications.json

Error Handling
--------------
- ConfigError: YAML syntax errors, empty files, non-mapping top level,
  missing required settings. Errors are chained with "from err".
- FileNotFoundError: An explicitly given settings file does not exist.

Examples
--------
    >>> from pathlib import Path
    >>> from versiongate.config import load_settings
    >>> settings = load_settings(Path("versiongate.yaml"))
    >>> settings["document"]["timeout"]
    10
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from versiongate.exceptions import ConfigError
from versiongate.logging import get_global_logger

DEFAULT_SETTINGS: dict[str, Any] = {
    "app_id": None,
    "current_version": None,
    "platform": "android",
    "platform_level": 0,
    "document": {
        "source": None,
        "timeout": 30,
        "headers": {},
    },
    "ledger": {
        "path": "state/notifications.json",
    },
}

# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """
    Load a YAML file and return the parsed Python object.

    Raises:
      FileNotFoundError - when file does not exist
      ConfigError       - for invalid YAML or an empty file
    """
    if not p.exists():
        raise FileNotFoundError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - list + list -> overlay REPLACES base (not concatenated)
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def _drop_none(overrides: dict[str, Any]) -> dict[str, Any]:
    """Remove None values (recursively) so unset CLI flags don't clobber."""
    cleaned: dict[str, Any] = {}
    for k, v in overrides.items():
        if isinstance(v, dict):
            nested = _drop_none(v)
            if nested:
                cleaned[k] = nested
        elif v is not None:
            cleaned[k] = v
    return cleaned


# -------------------------------
# Path resolution
# -------------------------------


def _resolve_known_paths(cfg: dict[str, Any], base_dir: Path) -> None:
    """
    Resolve relative path fields against 'base_dir'. Modifies cfg in place.

    Handled:
      - cfg["ledger"]["path"]
      - cfg["document"]["source"] when it is a file path
    """
    ledger = cfg.get("ledger")
    if isinstance(ledger, dict):
        raw_path = ledger.get("path")
        if isinstance(raw_path, str) and raw_path and not Path(raw_path).is_absolute():
            ledger["path"] = str((base_dir / raw_path).resolve())

    document = cfg.get("document")
    if isinstance(document, dict):
        source = document.get("source")
        if (
            isinstance(source, str)
            and source
            and not source.lower().startswith(("http://", "https://"))
            and not Path(source).is_absolute()
        ):
            document["source"] = str((base_dir / source).resolve())


# -------------------------------
# Validation
# -------------------------------


def _check_platform_level(cfg: dict[str, Any]) -> None:
    """Raise ConfigError unless cfg["platform_level"] is an int >= 0."""
    level = cfg.get("platform_level")
    # bool is an int subclass, reject it explicitly
    if isinstance(level, bool) or not isinstance(level, int) or level < 0:
        raise ConfigError(
            f"platform_level must be a non-negative integer, got {level!r}"
        )


# -------------------------------
# Public API
# -------------------------------


def load_settings(
    settings_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Load the effective settings.

    Steps
      1) Start from DEFAULT_SETTINGS.
      2) If given, read the settings YAML and resolve its relative paths
         against the file's directory.
      3) Merge: defaults -> file -> overrides (None overrides are ignored).

    Returns
      A merged settings dict.

    Raises
      ConfigError on YAML errors, a non-mapping settings file or a
      platform_level that is not a non-negative integer,
      FileNotFoundError if settings_path does not exist.
    """
    logger = get_global_logger()
    merged = copy.deepcopy(DEFAULT_SETTINGS)

    if settings_path is not None:
        settings_path = settings_path.resolve()
        logger.verbose("CONFIG", f"Loading settings: {settings_path}")
        file_settings = _load_yaml_file(settings_path)
        if not isinstance(file_settings, dict):
            raise ConfigError(
                f"Top-level YAML must be a mapping (dict): {settings_path}"
            )
        _resolve_known_paths(file_settings, settings_path.parent)
        merged = _deep_merge_dicts(merged, file_settings)

    if overrides:
        merged = _deep_merge_dicts(merged, _drop_none(overrides))

    _check_platform_level(merged)
    logger.debug("CONFIG", f"Effective settings: {merged}")
    return merged


def require_setting(settings: dict[str, Any], dotted_key: str) -> Any:
    """
    Return a setting by dotted key (e.g. "document.source").

    Raises
      ConfigError if the setting is missing, None or empty.
    """
    node: Any = settings
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            node = None
            break
        node = node[part]
    if node is None or node == "":
        raise ConfigError(f"Missing required setting: {dotted_key!r}")
    return node
