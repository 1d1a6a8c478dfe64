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

"""Local and in-memory document loaders."""

from __future__ import annotations

from pathlib import Path

from versiongate.exceptions import FetchError
from versiongate.logging import Logger, get_global_logger

from .base import register_loader


class FileLoader:
    """Loader reading a UTF-8 document from the local filesystem."""

    def __init__(self, path: str | Path, logger: Logger | None = None) -> None:
        self.path = Path(path)
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else get_global_logger()

    def fetch(self) -> str:
        """Read the document.

        Raises:
            FetchError: If the file is missing or unreadable.
        """
        self.logger.verbose("LOADER", f"Reading {self.path}")
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            raise FetchError(f"Cannot read update document {self.path}: {err}") from err


class StaticLoader:
    """Loader returning a document already held in memory."""

    def __init__(self, document: str) -> None:
        self.document = document

    def fetch(self) -> str:
        return self.document


register_loader("file", FileLoader)
register_loader("static", StaticLoader)
