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

"""HTTP document loader for versiongate.

Fetches the update document with a single GET request. There is no retry:
a failed request ends the check with an "unknown" error, and the caller
decides whether to try again later.

Configuration:

- **url** (str, required): http(s) URL of the document.
- **headers** (dict, optional): Extra request headers. A value of the form
    "${NAME}" is replaced by the environment variable NAME; unset variables
    drop the header.
- **timeout** (int, optional): Request timeout in seconds. Default is 30.
- **logger** (Logger, optional): Logger for request diagnostics. Defaults to
    the global logger at fetch time.

Example:
    ```python
    from versiongate.loaders.http import HttpLoader

    loader = HttpLoader(
        "https://example.com/update.json",
        headers={"Authorization": "Bearer ${UPDATE_TOKEN}"},
    )
    raw = loader.fetch()
    ```
"""

from __future__ import annotations

import os

import requests

from versiongate import __version__
from versiongate.exceptions import NetworkError
from versiongate.logging import Logger, get_global_logger

from .base import register_loader

DEFAULT_TIMEOUT = 30


def expand_env_headers(
    headers: dict[str, str], logger: Logger | None = None
) -> dict[str, str]:
    """Replace "${NAME}" header values with environment variables.

    Headers whose variable is unset are dropped.
    """
    if logger is None:
        logger = get_global_logger()
    expanded: dict[str, str] = {}
    for key, value in headers.items():
        if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            env_value = os.environ.get(env_var)
            if not env_value:
                logger.verbose("LOADER", f"Warning: Environment variable {env_var} not set")
            else:
                expanded[key] = env_value
        else:
            expanded[key] = str(value)
    return expanded


class HttpLoader:
    """Loader for documents served over HTTP(S)."""

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: int | float = DEFAULT_TIMEOUT,
        logger: Logger | None = None,
    ) -> None:
        if not url:
            raise ValueError("HttpLoader requires a url")
        self.url = url
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else get_global_logger()

    def fetch(self) -> str:
        """GET the document and return its text.

        Raises:
            NetworkError: On connection errors, timeouts or non-2xx status
                (chained with 'from err').
        """
        logger = self.logger
        headers = {"User-Agent": f"versiongate/{__version__}"}
        headers.update(expand_env_headers(self.headers, logger))

        logger.verbose("LOADER", f"GET {self.url}")
        try:
            response = requests.get(self.url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as err:
            raise NetworkError(
                f"Update document request failed: {response.status_code} "
                f"{response.reason}"
            ) from err
        except requests.exceptions.RequestException as err:
            raise NetworkError(f"Failed to fetch update document: {err}") from err

        logger.verbose("LOADER", f"Response: {response.status_code} OK")
        logger.debug("LOADER", f"Body: {response.text[:200]}")
        return response.text


register_loader("http", HttpLoader)
