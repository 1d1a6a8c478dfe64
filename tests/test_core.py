"""
Tests for versiongate.core module.

Tests the check coordinator including:
- End-to-end checks from fixture documents
- Error mapping to CheckFailed kinds
- Ledger reads and writes
- Callback delivery and futures
- Per-identity serialization
"""

from __future__ import annotations

from pathlib import Path
import threading
from unittest.mock import MagicMock

import pytest
import requests_mock

from versiongate.core import CheckCoordinator, check_for_updates
from versiongate.exceptions import (
    CheckInProgressError,
    FetchError,
    LedgerError,
    NetworkError,
)
from versiongate.ledger import InMemoryLedger, JsonFileLedger
from versiongate.loaders import FileLoader, StaticLoader
from versiongate.platform import PlatformInfo
from versiongate.results import CheckFailed, NoUpdate, UpdateAvailable

APP_ID = "com.example.app"


def _coordinator(ledger, version="2.0.0", level=16, **kwargs) -> CheckCoordinator:
    return CheckCoordinator(
        app_id=APP_ID,
        platform_info=PlatformInfo(version, level),
        ledger=ledger,
        **kwargs,
    )


class BlockingLoader:
    """Loader that waits until released, to hold a check in flight."""

    def __init__(self, document: str):
        self.document = document
        self.started = threading.Event()
        self.release = threading.Event()

    def fetch(self) -> str:
        self.started.set()
        self.release.wait(timeout=5)
        return self.document


class TestCheck:
    """Tests for CheckCoordinator.check() on fixture documents."""

    def test_optional_update(self, fixtures_dir: Path, ledger):
        """Test 2.0.0 against min 1.2.3 / latest 2.4.5."""
        outcome = _coordinator(ledger).check(
            FileLoader(fixtures_dir / "valid_update_full.json")
        )
        assert outcome == UpdateAvailable(
            "2.4.5", False, {"key1": "value1", "key2": "value2"}
        )

    def test_mandatory_update(self, fixtures_dir: Path, ledger):
        """Test 1.0.0 below the minimum."""
        outcome = _coordinator(ledger, "1.0.0").check(
            FileLoader(fixtures_dir / "valid_update_full.json")
        )
        assert isinstance(outcome, UpdateAvailable)
        assert outcome.mandatory is True
        assert outcome.target_version == "2.4.5"

    def test_up_to_date(self, fixtures_dir: Path, ledger):
        """Test current == latest version."""
        outcome = _coordinator(ledger, "2.4.5").check(
            FileLoader(fixtures_dir / "valid_update_full.json")
        )
        assert isinstance(outcome, NoUpdate)
        assert outcome.metadata == {"key1": "value1", "key2": "value2"}

    def test_only_min_version_up_to_date(self, fixtures_dir: Path, ledger):
        """Test that a document with only a minimum tier yields NoUpdate."""
        outcome = _coordinator(ledger).check(
            FileLoader(fixtures_dir / "valid_update_only_min_version.json")
        )
        assert isinstance(outcome, NoUpdate)

    def test_other_platform(self, fixtures_dir: Path, ledger):
        """Test that the coordinator reads the configured platform section."""
        outcome = _coordinator(ledger, "1.0.0", platform="ios").check(
            FileLoader(fixtures_dir / "valid_update_full.json")
        )
        assert isinstance(outcome, UpdateAvailable)
        assert outcome.mandatory is True


class TestErrorMapping:
    """Tests for mapping failures to CheckFailed."""

    def test_invalid_document_version(self, fixtures_dir: Path, ledger):
        """Test that a malformed tier version is wrong_version."""
        outcome = _coordinator(ledger).check(
            FileLoader(fixtures_dir / "invalid_update_invalid_version.json")
        )
        assert isinstance(outcome, CheckFailed)
        assert outcome.kind == "wrong_version"
        assert outcome.metadata == {}

    def test_missing_platform_section(self, fixtures_dir: Path, ledger):
        """Test that a document without the platform section is wrong_version."""
        outcome = _coordinator(ledger).check(
            FileLoader(fixtures_dir / "invalid_update_no_android.json")
        )
        assert outcome == CheckFailed("wrong_version", outcome.message)

    def test_invalid_current_version(self, fixtures_dir: Path, ledger):
        """Test that a malformed application version is wrong_version."""
        outcome = _coordinator(ledger, "2.0").check(
            FileLoader(fixtures_dir / "valid_update_full.json")
        )
        assert isinstance(outcome, CheckFailed)
        assert outcome.kind == "wrong_version"

    def test_not_json_is_wrong_version(self, fixtures_dir: Path, ledger):
        """Test that a non-JSON document is a wrong_version error."""
        outcome = _coordinator(ledger, "3.0.0").check(
            FileLoader(fixtures_dir / "invalid_update_no_json.json")
        )
        assert isinstance(outcome, CheckFailed)
        assert outcome.kind == "wrong_version"
        assert ledger.get(APP_ID) is None

    def test_fetch_error_is_unknown(self, ledger):
        """Test that loader failures are unknown errors."""
        loader = MagicMock()
        loader.fetch.side_effect = FetchError("disk on fire")

        outcome = _coordinator(ledger).check(loader)

        assert outcome == CheckFailed("unknown", "disk on fire")

    def test_network_error_is_unknown(self, ledger):
        """Test that HTTP failures are unknown errors."""
        loader = MagicMock()
        loader.fetch.side_effect = NetworkError("503 Service Unavailable")

        outcome = _coordinator(ledger).check(loader)

        assert isinstance(outcome, CheckFailed)
        assert outcome.kind == "unknown"

    def test_unexpected_loader_exception_is_unknown(self, ledger):
        """Test that arbitrary collaborator exceptions are unknown errors."""
        loader = MagicMock()
        loader.fetch.side_effect = RuntimeError("boom")

        outcome = _coordinator(ledger).check(loader)

        assert outcome.kind == "unknown"

    def test_custom_parser_failure_is_unknown(self, ledger):
        """Test that an injected parser raising KeyError is unknown."""
        parser = MagicMock(side_effect=KeyError("android"))

        outcome = _coordinator(ledger, parser=parser).check(StaticLoader("{}"))

        assert outcome.kind == "unknown"
        parser.assert_called_once_with("{}", "android")

    def test_ledger_read_failure_is_unknown(self, fixtures_dir: Path):
        """Test that a failing ledger read is an unknown error."""
        ledger = MagicMock()
        ledger.get.side_effect = LedgerError("corrupted")

        outcome = _coordinator(ledger).check(
            FileLoader(fixtures_dir / "valid_update_full.json")
        )

        assert outcome.kind == "unknown"
        ledger.set.assert_not_called()

    def test_ledger_write_failure_is_unknown(self, fixtures_dir: Path):
        """Test that a failing ledger write is an unknown error."""
        ledger = MagicMock()
        ledger.get.return_value = None
        ledger.set.side_effect = LedgerError("read-only")

        outcome = _coordinator(ledger).check(
            FileLoader(fixtures_dir / "valid_update_full.json")
        )

        assert outcome.kind == "unknown"

    def test_no_ledger_write_on_error(self, fixtures_dir: Path):
        """Test that errors never write the ledger."""
        ledger = MagicMock()
        ledger.get.return_value = None

        _coordinator(ledger, "2.0").check(
            FileLoader(fixtures_dir / "valid_update_full.json")
        )

        ledger.set.assert_not_called()


class TestLedgerInteraction:
    """Tests for ledger reads and writes during checks."""

    def test_optional_update_recorded(self, fixtures_dir: Path, ledger):
        """Test that an optional update writes the target version."""
        _coordinator(ledger).check(FileLoader(fixtures_dir / "valid_update_full.json"))
        assert ledger.get(APP_ID) == "2.4.5"

    def test_once_only_suppressed_on_second_check(self, fixtures_dir: Path, ledger):
        """Test that a ONCE update is offered only on the first check."""
        coordinator = _coordinator(ledger)
        loader = FileLoader(fixtures_dir / "valid_update_full.json")

        first = coordinator.check(loader)
        second = coordinator.check(loader)

        assert isinstance(first, UpdateAvailable)
        assert isinstance(second, NoUpdate)

    def test_already_notified(self, fixtures_dir: Path):
        """Test that a prior ledger entry suppresses a ONCE update."""
        ledger = InMemoryLedger({APP_ID: "2.4.5"})
        outcome = _coordinator(ledger).check(
            FileLoader(fixtures_dir / "valid_update_full.json")
        )
        assert isinstance(outcome, NoUpdate)

    def test_always_offered_every_check(self, fixtures_dir: Path, ledger):
        """Test that an ALWAYS update is offered every time."""
        coordinator = _coordinator(ledger)
        loader = FileLoader(fixtures_dir / "valid_update_notification_always.json")

        assert isinstance(coordinator.check(loader), UpdateAvailable)
        assert isinstance(coordinator.check(loader), UpdateAvailable)
        assert ledger.get(APP_ID) == "2.4.5"

    def test_mandatory_not_recorded(self, fixtures_dir: Path, ledger):
        """Test that mandatory updates do not touch the ledger."""
        _coordinator(ledger, "1.0.0").check(
            FileLoader(fixtures_dir / "valid_update_full.json")
        )
        assert ledger.get(APP_ID) is None

    def test_json_file_ledger_persists_between_runs(self, fixtures_dir: Path, tmp_path):
        """Test suppression across coordinator instances via the ledger file."""
        ledger_file = tmp_path / "notifications.json"
        loader = FileLoader(fixtures_dir / "valid_update_full.json")

        first = _coordinator(JsonFileLedger(ledger_file)).check(loader)
        second = _coordinator(JsonFileLedger(ledger_file)).check(loader)

        assert isinstance(first, UpdateAvailable)
        assert isinstance(second, NoUpdate)


class TestAsyncCheck:
    """Tests for check_async() and callback delivery."""

    def test_callback_receives_update(self, fixtures_dir: Path, ledger, callback):
        """Test that the callback is called once with the update."""
        with _coordinator(ledger) as coordinator:
            future = coordinator.check_async(
                FileLoader(fixtures_dir / "valid_update_full.json"), callback
            )
            outcome = future.result(timeout=5)

        assert isinstance(outcome, UpdateAvailable)
        assert callback.calls == [
            (
                "on_new_update",
                ("2.4.5", False, {"key1": "value1", "key2": "value2"}),
            )
        ]

    def test_callback_receives_no_update(self, fixtures_dir: Path, ledger, callback):
        """Test delivery of NoUpdate."""
        with _coordinator(ledger, "3.0.0") as coordinator:
            coordinator.check_async(
                FileLoader(fixtures_dir / "valid_update_full.json"), callback
            ).result(timeout=5)

        assert [name for name, _ in callback.calls] == ["on_no_update"]

    def test_callback_receives_error(self, fixtures_dir: Path, ledger, callback):
        """Test delivery of an error kind."""
        with _coordinator(ledger) as coordinator:
            coordinator.check_async(
                FileLoader(fixtures_dir / "invalid_update_no_android.json"), callback
            ).result(timeout=5)

        assert callback.calls == [("on_error", ("wrong_version",))]

    def test_future_without_callback(self, fixtures_dir: Path, ledger):
        """Test that the future alone carries the outcome."""
        with _coordinator(ledger) as coordinator:
            future = coordinator.check_async(
                FileLoader(fixtures_dir / "valid_update_full.json")
            )
            assert isinstance(future.result(timeout=5), UpdateAvailable)

    def test_second_check_while_running_rejected(self, read_fixture, ledger):
        """Test that a concurrent check for the same identity is refused."""
        loader = BlockingLoader(read_fixture("valid_update_full.json"))

        with _coordinator(ledger) as coordinator:
            future = coordinator.check_async(loader)
            assert loader.started.wait(timeout=5)
            assert coordinator.is_checking()

            with pytest.raises(CheckInProgressError):
                coordinator.check(StaticLoader("{}"))
            with pytest.raises(CheckInProgressError):
                coordinator.check_async(StaticLoader("{}"))

            loader.release.set()
            assert isinstance(future.result(timeout=5), UpdateAvailable)

        assert not coordinator.is_checking()

    def test_second_coordinator_same_identity_rejected(self, read_fixture, ledger):
        """Test that the reservation is shared between coordinators."""
        loader = BlockingLoader(read_fixture("valid_update_full.json"))
        first = _coordinator(ledger)
        second = _coordinator(ledger)

        with first:
            future = first.check_async(loader)
            assert loader.started.wait(timeout=5)
            assert second.is_checking()

            with pytest.raises(CheckInProgressError):
                second.check(StaticLoader(read_fixture("valid_update_full.json")))
            with pytest.raises(CheckInProgressError):
                second.check_async(StaticLoader("{}"))

            loader.release.set()
            outcome = future.result(timeout=5)
            assert isinstance(outcome, UpdateAvailable)
            assert outcome.target_version == "2.4.5"
            assert not outcome.mandatory

        assert not second.is_checking()
        # The once-only version was recorded by the first check
        assert isinstance(
            second.check(StaticLoader(read_fixture("valid_update_full.json"))),
            NoUpdate,
        )

    def test_other_identity_not_blocked(self, read_fixture, ledger):
        """Test that a check for another identity runs concurrently."""
        loader = BlockingLoader(read_fixture("valid_update_full.json"))
        other = CheckCoordinator(
            "com.example.other", PlatformInfo("2.0.0", 16), ledger
        )

        with _coordinator(ledger) as coordinator:
            future = coordinator.check_async(loader)
            assert loader.started.wait(timeout=5)

            outcome = other.check(StaticLoader(read_fixture("valid_update_full.json")))
            assert isinstance(outcome, UpdateAvailable)

            loader.release.set()
            future.result(timeout=5)

        assert not coordinator.is_checking()

    def test_sequential_checks_allowed(self, fixtures_dir: Path, ledger):
        """Test that the reservation is released after each check."""
        coordinator = _coordinator(ledger)
        loader = FileLoader(fixtures_dir / "valid_update_notification_always.json")

        coordinator.check(loader)
        with coordinator:
            coordinator.check_async(loader).result(timeout=5)
        coordinator.check(loader)

        assert not coordinator.is_checking()

    def test_empty_app_id_rejected(self, ledger):
        """Test that an app_id is required."""
        with pytest.raises(ValueError):
            CheckCoordinator("", PlatformInfo("1.0.0"), ledger)


class TestCheckForUpdates:
    """Tests for the check_for_updates() convenience function."""

    def test_from_file_path(self, fixtures_dir: Path):
        """Test a check against a local file with an in-memory ledger."""
        outcome = check_for_updates(
            str(fixtures_dir / "valid_update_full.json"),
            app_id=APP_ID,
            current_version="2.0.0",
            platform_level=16,
        )
        assert outcome == UpdateAvailable(
            "2.4.5", False, {"key1": "value1", "key2": "value2"}
        )

    def test_from_url(self, read_fixture):
        """Test a check against an HTTP document."""
        url = "https://example.com/update.json"
        with requests_mock.Mocker() as m:
            m.get(url, text=read_fixture("valid_update_full.json"))
            outcome = check_for_updates(
                url, app_id=APP_ID, current_version="1.0.0", timeout=5
            )
        assert isinstance(outcome, UpdateAvailable)
        assert outcome.mandatory is True

    def test_http_failure(self):
        """Test that a 500 response is an unknown error."""
        url = "https://example.com/update.json"
        with requests_mock.Mocker() as m:
            m.get(url, status_code=500)
            outcome = check_for_updates(url, app_id=APP_ID, current_version="1.0.0")
        assert outcome.kind == "unknown"

    def test_ledger_file_written(self, fixtures_dir: Path, tmp_path):
        """Test that ledger_file persists the notification."""
        ledger_file = tmp_path / "state" / "notifications.json"
        check_for_updates(
            str(fixtures_dir / "valid_update_full.json"),
            app_id=APP_ID,
            current_version="2.0.0",
            ledger_file=ledger_file,
        )
        assert JsonFileLedger(ledger_file).get(APP_ID) == "2.4.5"
