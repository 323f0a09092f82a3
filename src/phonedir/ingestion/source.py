"""Directory sources: where the spreadsheet bytes come from.

A source answers two questions: what version of the file is current
(``modified_time``) and what its bytes are (``read_bytes``). Both the file and
HTTP flavours validate payloads the same way before anything is decoded, since
misconfigured file servers happily answer 200 with an HTML error page.
"""

from __future__ import annotations

import errno
import logging
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Optional, Protocol, Union

import httpx

from phonedir.errors import (
    DirectoryError,
    EmptyDirectoryError,
    SourceMalformedError,
    SourceUnavailableError,
    TransientSourceError,
)

LOGGER = logging.getLogger(__name__)

SNIFF_BYTES = 200
HTML_MARKERS = (
    "<!DOCTYPE html>",
    "<html",
    "<HTML",
    "404",
    "Not Found",
    "Cannot GET",
    "<head>",
)

Version = Union[float, str, None]


class DirectorySource(Protocol):
    def modified_time(self) -> Version: ...

    def read_bytes(self) -> bytes: ...

    def describe(self) -> str: ...


def validate_payload(data: bytes, content_type: Optional[str] = None) -> bytes:
    """Reject payloads that cannot be a spreadsheet before decoding them."""
    if content_type and "text/html" in content_type.lower():
        raise SourceMalformedError(f"Unexpected content type {content_type!r}")

    if len(data) == 0:
        raise EmptyDirectoryError("Spreadsheet payload is empty")

    head = data[:SNIFF_BYTES].decode("utf-8", errors="ignore")
    for marker in HTML_MARKERS:
        if marker in head:
            raise SourceMalformedError(f"Payload looks like an HTML page (found {marker!r})")
    return data


def _os_error(path: Path, exc: OSError) -> DirectoryError:
    if exc.errno in (errno.EIO, errno.EAGAIN, errno.ETIMEDOUT):
        return TransientSourceError(f"I/O error reading {path}: {exc}")
    return SourceUnavailableError(f"Cannot access directory file {path}: {exc}")


class FileSource:
    """Spreadsheet stored on the local filesystem."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def describe(self) -> str:
        return str(self.path)

    def modified_time(self) -> float:
        try:
            return self.path.stat().st_mtime
        except FileNotFoundError as exc:
            raise SourceUnavailableError(f"Directory file not found: {self.path}") from exc
        except OSError as exc:
            raise _os_error(self.path, exc) from exc

    def read_bytes(self) -> bytes:
        try:
            data = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise SourceUnavailableError(f"Directory file not found: {self.path}") from exc
        except IsADirectoryError as exc:
            raise SourceMalformedError(f"Expected a file, got a directory: {self.path}") from exc
        except OSError as exc:
            raise _os_error(self.path, exc) from exc
        return validate_payload(data)


class HttpSource:
    """Spreadsheet served over HTTP(S)."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport

    def describe(self) -> str:
        return self.url

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport, follow_redirects=True)

    def _check_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status in (404, 410):
            raise SourceUnavailableError(f"HTTP {status}: {self.url}")
        if status >= 500:
            raise TransientSourceError(f"HTTP {status}: {self.url}")
        if status >= 400:
            raise SourceUnavailableError(f"HTTP {status}: {self.url}")

    def modified_time(self) -> Version:
        try:
            with self._client() as client:
                response = client.head(self.url)
        except httpx.TransportError as exc:
            raise TransientSourceError(f"Connection failed for {self.url}: {exc}") from exc

        # Some static servers refuse HEAD; the version is then unknown.
        if response.status_code in (405, 501):
            return None
        self._check_status(response)
        last_modified = response.headers.get("last-modified")
        if last_modified:
            try:
                return parsedate_to_datetime(last_modified).timestamp()
            except (TypeError, ValueError):
                LOGGER.debug("Unparseable Last-Modified %r from %s", last_modified, self.url)
        return response.headers.get("etag")

    def read_bytes(self) -> bytes:
        try:
            with self._client() as client:
                response = client.get(self.url)
        except httpx.TransportError as exc:
            raise TransientSourceError(f"Connection failed for {self.url}: {exc}") from exc

        self._check_status(response)
        return validate_payload(response.content, response.headers.get("content-type"))


def open_source(location: Union[str, Path], *, timeout: float = 10.0) -> DirectorySource:
    """Build the source matching ``location``: a URL or a filesystem path."""
    text = str(location)
    if text.startswith(("http://", "https://")):
        return HttpSource(text, timeout=timeout)
    return FileSource(Path(text))
