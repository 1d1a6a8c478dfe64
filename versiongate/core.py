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

"""Core orchestration for versiongate.

This module drives one update check end to end:

1. Fetch the raw document through a loader
2. Parse it into an UpdateConfiguration for the configured platform
3. Read the notification ledger for the application identity
4. Run the decision engine
5. Record the version in the ledger after an optional update
6. Hand back the outcome (return value, callback and/or future)

No version comparison happens here; all decision semantics live in
versiongate.policy.engine.

Error Mapping:

- InvalidVersionFormat, StructuralError, DocumentSyntaxError ->
    CheckFailed("wrong_version")
- Anything else raised by a collaborator (loader, custom parser, ledger) ->
    CheckFailed("unknown")

Neither kind writes the ledger, and no partial outcome is produced.

Concurrency:

One check per application identity may be outstanding in the process. The
reservation is shared by every CheckCoordinator, so starting a second check
for the same identity, from the same or another coordinator, raises
CheckInProgressError immediately. Two ledger writes for the same identity
therefore never race. check_async() runs the check on the coordinator's worker thread
and delivers the outcome to the callback exactly once, before the returned
future resolves.

Example:
    Blocking check:
        ```python
        from pathlib import Path
        from versiongate.core import CheckCoordinator
        from versiongate.ledger import JsonFileLedger
        from versiongate.loaders import HttpLoader
        from versiongate.platform import PlatformInfo

        coordinator = CheckCoordinator(
            app_id="com.example.app",
            platform_info=PlatformInfo("2.0.0", platform_level=16),
            ledger=JsonFileLedger(Path("state/notifications.json")),
        )
        outcome = coordinator.check(HttpLoader("https://example.com/update.json"))
        ```

    Callback-style check:
        ```python
        with CheckCoordinator(...) as coordinator:
            future = coordinator.check_async(loader, callback=my_callback)
            future.result()
        ```
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
import threading
from typing import Any

from versiongate.document import DEFAULT_PLATFORM, UpdateConfiguration, parse_document
from versiongate.exceptions import (
    CheckInProgressError,
    DocumentSyntaxError,
    InvalidVersionFormat,
    StructuralError,
)
from versiongate.ledger import InMemoryLedger, JsonFileLedger, NotificationLedger
from versiongate.loaders import DocumentLoader, loader_for_source
from versiongate.logging import Logger, get_global_logger
from versiongate.platform import PlatformInfo
from versiongate.policy import decide, should_record_notification
from versiongate.results import (
    CheckFailed,
    Outcome,
    UpdateCallback,
    deliver_outcome,
)

DocumentParser = Callable[[Any, str], UpdateConfiguration]

_TOTAL_STEPS = 4

# Identities with a check in flight, shared by all coordinators
_IN_FLIGHT: set[str] = set()
_IN_FLIGHT_LOCK = threading.Lock()


class CheckCoordinator:
    """Runs update checks for one application identity.

    Attributes:
        app_id: Application identity used as the ledger key.
        platform_info: Running application's version and platform level.
        ledger: Notification ledger.
        platform: Document section to read (e.g. "android").
    """

    def __init__(
        self,
        app_id: str,
        platform_info: PlatformInfo,
        ledger: NotificationLedger,
        *,
        platform: str = DEFAULT_PLATFORM,
        parser: DocumentParser = parse_document,
        logger: Logger | None = None,
        max_workers: int = 1,
    ) -> None:
        if not app_id:
            raise ValueError("CheckCoordinator requires an app_id")
        self.app_id = app_id
        self.platform_info = platform_info
        self.ledger = ledger
        self.platform = platform
        self._parser = parser
        self._logger = logger
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else get_global_logger()

    # -------------------------------
    # Per-identity serialization
    # -------------------------------

    def _reserve(self) -> None:
        with _IN_FLIGHT_LOCK:
            if self.app_id in _IN_FLIGHT:
                raise CheckInProgressError(
                    f"An update check for {self.app_id!r} is already running"
                )
            _IN_FLIGHT.add(self.app_id)

    def _release(self) -> None:
        with _IN_FLIGHT_LOCK:
            _IN_FLIGHT.discard(self.app_id)

    def is_checking(self) -> bool:
        """Return True while a check for this identity is outstanding."""
        with _IN_FLIGHT_LOCK:
            return self.app_id in _IN_FLIGHT

    # -------------------------------
    # Check pipeline
    # -------------------------------

    def _run(self, loader: DocumentLoader) -> Outcome:
        logger = self.logger

        logger.step(1, _TOTAL_STEPS, "Fetching update document...")
        try:
            raw = loader.fetch()
        except Exception as err:
            logger.verbose("CHECK", f"Fetch failed: {err}")
            return CheckFailed(kind="unknown", message=str(err))

        logger.step(2, _TOTAL_STEPS, "Parsing update document...")
        try:
            config = self._parser(raw, self.platform)
        except (InvalidVersionFormat, StructuralError, DocumentSyntaxError) as err:
            logger.verbose("CHECK", f"Invalid document: {err}")
            return CheckFailed(kind="wrong_version", message=str(err))
        except Exception as err:
            logger.verbose("CHECK", f"Parse failed: {err}")
            return CheckFailed(kind="unknown", message=str(err))

        logger.step(3, _TOTAL_STEPS, "Deciding...")
        try:
            last_notified = self.ledger.get(self.app_id)
        except Exception as err:
            logger.verbose("LEDGER", f"Failed to read ledger: {err}")
            return CheckFailed(kind="unknown", message=str(err))
        logger.verbose("LEDGER", f"Last notified version: {last_notified}")

        try:
            outcome = decide(
                current_version=self.platform_info.version,
                platform_level=self.platform_info.platform_level,
                config=config,
                last_notified_version=last_notified,
                logger=logger,
            )
        except InvalidVersionFormat as err:
            logger.verbose("CHECK", f"Invalid application version: {err}")
            return CheckFailed(kind="wrong_version", message=str(err))

        logger.step(4, _TOTAL_STEPS, "Recording result...")
        if should_record_notification(outcome):
            try:
                self.ledger.set(self.app_id, outcome.target_version)
            except Exception as err:
                logger.verbose("LEDGER", f"Failed to write ledger: {err}")
                return CheckFailed(kind="unknown", message=str(err))
            logger.verbose("LEDGER", f"Recorded {outcome.target_version} for {self.app_id}")

        return outcome

    def check(self, loader: DocumentLoader) -> Outcome:
        """Run one check synchronously and return its outcome.

        Args:
            loader: Loader for the raw update document.

        Returns:
            NoUpdate, UpdateAvailable or CheckFailed. Collaborator and version
            errors are reported as CheckFailed, never raised.

        Raises:
            CheckInProgressError: If a check for the same identity is running.
        """
        self._reserve()
        try:
            return self._run(loader)
        finally:
            self._release()

    def check_async(
        self,
        loader: DocumentLoader,
        callback: UpdateCallback | None = None,
    ) -> Future[Outcome]:
        """Run one check on the worker thread.

        The outcome is delivered to ``callback`` (if given) exactly once and
        then becomes the result of the returned future. Cancelling the future
        before the check has started skips both.

        Raises:
            CheckInProgressError: If a check for the same identity is running.
        """
        self._reserve()

        def _work() -> Outcome:
            try:
                outcome = self._run(loader)
            finally:
                self._release()
            if callback is not None:
                deliver_outcome(outcome, callback)
            return outcome

        def _on_done(f: Future[Outcome]) -> None:
            # A future cancelled before it ran never reached _work
            if f.cancelled():
                self._release()

        try:
            future = self._get_executor().submit(_work)
        except BaseException:
            self._release()
            raise
        future.add_done_callback(_on_done)
        return future

    # -------------------------------
    # Executor lifecycle
    # -------------------------------

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="versiongate-check",
                )
            return self._executor

    def close(self, wait: bool = True) -> None:
        """Shut down the worker thread, waiting for running checks by default."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)

    def __enter__(self) -> CheckCoordinator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def check_for_updates(
    source: str,
    *,
    app_id: str,
    current_version: str,
    platform_level: int = 0,
    platform: str = DEFAULT_PLATFORM,
    ledger: NotificationLedger | None = None,
    ledger_file: Path | None = None,
    timeout: int | float = 30,
    headers: Mapping[str, str] | None = None,
) -> Outcome:
    """Run a single blocking check against a URL or file path.

    This is the programmatic entry point used by 'versiongate check'.

    Args:
        source: http(s) URL or local path of the update document.
        app_id: Application identity used as the ledger key.
        current_version: Version of the running application.
        platform_level: Platform API level of the running application.
        platform: Document section to read.
        ledger: Ledger to use. Takes precedence over ledger_file.
        ledger_file: JSON ledger path. When neither ledger nor ledger_file is
            given an in-memory ledger is used (nothing persists).
        timeout: HTTP timeout in seconds.
        headers: Extra HTTP headers ("${ENV}" values are expanded).

    Returns:
        The check outcome.

    Example:
        ```python
        outcome = check_for_updates(
            "https://example.com/update.json",
            app_id="com.example.app",
            current_version="2.0.0",
            platform_level=16,
            ledger_file=Path("state/notifications.json"),
        )
        ```
    """
    if ledger is None:
        ledger = JsonFileLedger(ledger_file) if ledger_file else InMemoryLedger()

    if source.lower().startswith(("http://", "https://")):
        loader = loader_for_source(source, timeout=timeout, headers=dict(headers or {}))
    else:
        loader = loader_for_source(source)

    coordinator = CheckCoordinator(
        app_id=app_id,
        platform_info=PlatformInfo(current_version, platform_level),
        ledger=ledger,
        platform=platform,
    )
    return coordinator.check(loader)
