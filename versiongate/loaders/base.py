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

"""Document loader protocol and registry for versiongate.

This module defines the foundational components for retrieving raw update
documents:

- DocumentLoader protocol: Interface that all loaders must implement
- Loader registry: Global dict mapping loader names to implementations
- Registration and lookup functions: register_loader(), get_loader() and
    loader_for_source()

Built-in loaders:

- http: GET a document from an http(s) URL with requests
- file: Read a document from the local filesystem
- static: Return a document held in memory

Design Philosophy:
    - Loaders are Protocol classes (structural subtyping, not inheritance)
    - Registration happens at module import time (loaders self-register)
    - A loader instance describes one document source; fetch() may be
      called repeatedly
    - Loaders raise FetchError (or NetworkError) and nothing else for
      retrieval problems

Example:
    Implementing a custom loader:
        ```python
        from versiongate.loaders.base import register_loader

        class S3Loader:
            def __init__(self, bucket: str, key: str):
                self.bucket = bucket
                self.key = key

            def fetch(self) -> str:
                ...

        register_loader("s3", S3Loader)
        loader = get_loader("s3", bucket="updates", key="config.json")
        ```
"""

from __future__ import annotations

from typing import Any, Protocol

from versiongate.exceptions import ConfigError

# -------------------------------
# Loader Protocol
# -------------------------------


class DocumentLoader(Protocol):
    """Protocol for raw document loaders."""

    def fetch(self) -> str:
        """Retrieve the raw update document.

        Returns:
            Document text.

        Raises:
            FetchError: If the document cannot be retrieved.
        """
        ...


# -------------------------------
# Loader Registry
# -------------------------------

_LOADER_REGISTRY: dict[str, type[DocumentLoader]] = {}


def register_loader(name: str, loader_class: type[DocumentLoader]) -> None:
    """Register a loader class by name in the global registry.

    Registering the same name twice overwrites the previous registration
    (allows monkey-patching for tests).

    Args:
        name: Loader name (e.g., "http").
        loader_class: Class implementing the DocumentLoader protocol.
    """
    _LOADER_REGISTRY[name] = loader_class


def get_loader(name: str, **options: Any) -> DocumentLoader:
    """Instantiate a registered loader.

    Args:
        name: Loader name. Must match a name passed to register_loader().
        **options: Keyword arguments forwarded to the loader constructor.

    Returns:
        A new loader instance.

    Raises:
        ConfigError: If the loader name is not registered. The message lists
            the available loaders.
    """
    if name not in _LOADER_REGISTRY:
        available = ", ".join(sorted(_LOADER_REGISTRY))
        raise ConfigError(
            f"Unknown document loader: {name!r}. Available: {available or '(none)'}"
        )
    return _LOADER_REGISTRY[name](**options)


def loader_for_source(source: str, **options: Any) -> DocumentLoader:
    """Pick a loader for a source string.

    http:// and https:// URLs use the "http" loader; anything else is read as
    a local file path with the "file" loader.

    Args:
        source: URL or file path.
        **options: Extra options for the http loader (timeout, headers).
            Ignored for files.
    """
    if source.lower().startswith(("http://", "https://")):
        return get_loader("http", url=source, **options)
    return get_loader("file", path=source)


def available_loaders() -> list[str]:
    """Return the sorted names of all registered loaders."""
    return sorted(_LOADER_REGISTRY)
