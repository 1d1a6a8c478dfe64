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

"""Document loaders for versiongate.

A loader retrieves the raw update document; it knows nothing about its
contents. Importing this package registers the built-in loaders.

Available Loaders:

http : HttpLoader
    GET the document from an http(s) URL (requests, no retry).
file : FileLoader
    Read the document from a local path.
static : StaticLoader
    Return a document string held in memory.

Example:
    from versiongate.loaders import loader_for_source

    loader = loader_for_source("https://example.com/update.json", timeout=10)
    raw = loader.fetch()
"""

from .base import (
    DocumentLoader,
    available_loaders,
    get_loader,
    loader_for_source,
    register_loader,
)
from .file import FileLoader, StaticLoader
from .http import HttpLoader

__all__ = [
    "DocumentLoader",
    "FileLoader",
    "HttpLoader",
    "StaticLoader",
    "available_loaders",
    "get_loader",
    "loader_for_source",
    "register_loader",
]
