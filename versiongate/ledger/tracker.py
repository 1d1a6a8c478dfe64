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

"""Notification ledger implementations for versiongate.

The ledger remembers, per application identity, the last optional-update
version that was surfaced to the user. The decision engine reads it to
suppress repeated "once_only" notifications; the coordinator writes it after
delivering an optional update.

Key Features:

- JSON-based ledger file (standard library, human-readable)
- Auto-creation of the ledger file and its directories
- Corrupted files are backed up and replaced with a fresh ledger
- Sorted keys and 2-space indentation for consistent diffs
- Writes reread the file first and replace it atomically
- In-memory ledger for tests, short-lived processes and --stateless runs

Ledger File Layout:

    {
      "apps": {
        "com.example.app": {
          "last_notified_version": "2.4.5",
          "notified_at": "2025-10-19T12:00:00+00:00"
        }
      },
      "metadata": {
        "last_updated": "...",
        "schema_version": "1",
        "versiongate_version": "0.1.0"
      }
    }

Example:
    High-level API with JsonFileLedger:
        ```python
        from pathlib import Path
        from versiongate.ledger import JsonFileLedger

        ledger = JsonFileLedger(Path("state/notifications.json"))
        ledger.get("com.example.app")        # None
        ledger.set("com.example.app", "2.4.5")
        ledger.get("com.example.app")        # "2.4.5"
        ```

    Low-level API with functions:
        ```python
        from versiongate.ledger import load_ledger, save_ledger

        data = load_ledger(Path("state/notifications.json"))
        save_ledger(data, Path("state/notifications.json"))
        ```
"""

from __future__ import annotations

from datetime import UTC, datetime
import json
from pathlib import Path
import tempfile
import threading
from typing import Any, Protocol

from versiongate import __version__
from versiongate.exceptions import LedgerError

SCHEMA_VERSION = "1"


class NotificationLedger(Protocol):
    """Protocol for ledger implementations."""

    def get(self, app_id: str) -> str | None:
        """Return the last notified optional version for app_id, or None."""
        ...

    def set(self, app_id: str, version: str) -> None:
        """Record version as the last notified optional version for app_id."""
        ...


class InMemoryLedger:
    """Ledger kept in a dict. Contents are lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._entries: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, app_id: str) -> str | None:
        with self._lock:
            return self._entries.get(app_id)

    def set(self, app_id: str, version: str) -> None:
        with self._lock:
            self._entries[app_id] = version


class JsonFileLedger:
    """Ledger persisted to a JSON file.

    The file is reread on every access, and ``set`` merges its single entry
    into the state it has just read. Several ledgers (or processes) pointed at
    one path therefore keep each other's entries. Each write goes to a
    temporary file that then replaces the ledger file.

    Attributes:
        ledger_file: Path to the JSON ledger file.
        state: Ledger dictionary as last read or written.

    Example:
        ```python
        ledger = JsonFileLedger(Path("state/notifications.json"))
        if ledger.get("com.example.app") != "2.4.5":
            ledger.set("com.example.app", "2.4.5")
        ```
    """

    def __init__(self, ledger_file: Path):
        self.ledger_file = ledger_file
        self.state: dict[str, Any] = {}
        self._lock = threading.Lock()

    def load(self) -> dict[str, Any]:
        """Load the ledger from file.

        Creates a default ledger if the file doesn't exist. A corrupted file
        (invalid JSON, invalid UTF-8 or not a JSON object) is renamed to
        ``<name>.json.backup`` and replaced with a fresh one.

        Returns:
            Loaded ledger dictionary.

        Raises:
            LedgerError: If the file was corrupted (after the backup was made)
                or cannot be read.
        """
        with self._lock:
            return self._load_locked()

    def _load_locked(self) -> dict[str, Any]:
        try:
            state = load_ledger(self.ledger_file)
        except FileNotFoundError:
            self.state = create_default_ledger()
            self._save_locked()
            return self.state
        except (json.JSONDecodeError, UnicodeDecodeError) as err:
            raise self._replace_corrupted(str(err)) from err
        except OSError as err:
            raise LedgerError(f"Cannot read ledger file {self.ledger_file}: {err}") from err

        if not isinstance(state, dict):
            raise self._replace_corrupted(
                f"top level is {type(state).__name__}, expected an object"
            )
        self.state = state
        return self.state

    def _replace_corrupted(self, reason: str) -> LedgerError:
        backup = self.ledger_file.with_suffix(".json.backup")
        self.ledger_file.replace(backup)
        self.state = create_default_ledger()
        self._save_locked()
        return LedgerError(
            f"Corrupted ledger file ({reason}) backed up to {backup}. "
            f"Created fresh ledger file."
        )

    def save(self) -> None:
        """Save the current ledger to file.

        Updates metadata.last_updated automatically.

        Raises:
            LedgerError: If the file cannot be written.
        """
        with self._lock:
            self._save_locked()

    def _save_locked(self) -> None:
        self.state.setdefault("metadata", {})
        self.state["metadata"]["last_updated"] = datetime.now(UTC).isoformat()
        try:
            save_ledger(self.state, self.ledger_file)
        except OSError as err:
            raise LedgerError(
                f"Cannot write ledger file {self.ledger_file}: {err}"
            ) from err

    def get(self, app_id: str) -> str | None:
        """Return the last notified optional version for app_id, or None."""
        with self._lock:
            entry = self._load_locked().get("apps", {}).get(app_id)
            if not entry:
                return None
            return entry.get("last_notified_version")

    def set(self, app_id: str, version: str) -> None:
        """Record version for app_id and save the file."""
        with self._lock:
            # Entries written by other ledgers since our last read survive
            state = self._load_locked()
            state.setdefault("apps", {})[app_id] = {
                "last_notified_version": version,
                "notified_at": datetime.now(UTC).isoformat(),
            }
            self._save_locked()


def create_default_ledger() -> dict[str, Any]:
    """Create a default empty ledger structure."""
    return {
        "metadata": {
            "versiongate_version": __version__,
            "schema_version": SCHEMA_VERSION,
            "last_updated": datetime.now(UTC).isoformat(),
        },
        "apps": {},
    }


def load_ledger(ledger_file: Path) -> dict[str, Any]:
    """Load a ledger from a JSON file.

    Raises:
        FileNotFoundError: If the ledger file doesn't exist.
        json.JSONDecodeError: If the file contains invalid JSON.
        UnicodeDecodeError: If the file is not UTF-8 text.
        OSError: If the file cannot be read.
    """
    with open(ledger_file, encoding="utf-8") as f:
        return json.load(f)


def save_ledger(state: dict[str, Any], ledger_file: Path) -> None:
    """Save a ledger to a JSON file with pretty-printing.

    Creates parent directories if needed. Uses 2-space indentation, sorted
    keys and a trailing newline. The JSON is written to a temporary file in
    the same directory which then replaces ledger_file, so readers never see
    a half-written ledger.

    Raises:
        OSError: If the file cannot be written.
    """
    ledger_file.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=ledger_file.parent,
        prefix=f".{ledger_file.name}.",
        suffix=".tmp",
        delete=False,
    ) as f:
        tmp_path = Path(f.name)
        try:
            json.dump(state, f, indent=2, sort_keys=True)
            f.write("\n")
        except BaseException:
            f.close()
            tmp_path.unlink(missing_ok=True)
            raise

    try:
        tmp_path.replace(ledger_file)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
