"""HTTP fetch capability backed by a shared ``requests`` session."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from pathlib import Path
import tempfile
from threading import Lock
from typing import Protocol, runtime_checkable

import requests

from fontsmith.core.config import DEFAULT_USER_AGENT
from fontsmith.core.exceptions import FetchError, TLSCertificateError


def _tls_help(url: str) -> str:
    return (
        "TLS certificate verification failed while downloading "
        f"'{url}'. On macOS run the Python 'Install Certificates.command' "
        "(from the python.org installer). On Windows run 'py -m pip install --upgrade certifi'. "
        "On Linux install your 'ca-certificates' package (apt/yum/apk). "
        "Also check system date/time and any proxy or corporate SSL inspection."
    )


@dataclass(slots=True)
class FetchResponse:
    """Status, headers, and raw body of a completed request."""

    status: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == 200

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def content_type(self) -> str:
        """Return the lowercase media type, without parameters such as ``charset``."""
        for name, value in self.headers.items():
            if name.lower() == "content-type":
                return value.split(";", 1)[0].strip().lower()
        return ""


@runtime_checkable
class Fetcher(Protocol):
    """Capability used by providers and the mirror to reach remote resources."""

    def fetch(self, url: str, *, user_agent: str | None = None) -> FetchResponse: ...


def absolute_url(url: str) -> str:
    """Give protocol-relative URLs an explicit ``https:`` scheme."""
    if url.startswith("//"):
        return f"https:{url}"
    return url


class HttpFetcher:
    """Fetch remote resources with a fixed browser user agent."""

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._session_lock = Lock()
        self._session = session
        self._timeout = timeout
        self._user_agent = user_agent

    def fetch(self, url: str, *, user_agent: str | None = None) -> FetchResponse:
        """Return the response for ``url``; transport failures raise ``FetchError``."""
        target = absolute_url(url)
        headers = {"User-Agent": user_agent or self._user_agent}
        client = self._ensure_session()
        try:
            response = client.get(target, headers=headers, timeout=self._timeout)
        except requests.exceptions.SSLError as exc:
            raise TLSCertificateError(_tls_help(target), url=target) from exc
        except requests.RequestException as exc:
            raise FetchError(f"Request to '{target}' failed: {exc}", url=target) from exc
        return FetchResponse(
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    def _ensure_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        with self._session_lock:
            if self._session is None:
                self._session = requests.Session()
            return self._session


def download_to_temp(fetcher: Fetcher, url: str, *, directory: Path | None = None) -> Path:
    """Download ``url`` into a fresh temporary file and return its path."""
    response = fetcher.fetch(url)
    if not response.ok:
        raise FetchError(
            f"Unexpected HTTP {response.status} while downloading '{url}'.",
            url=url,
            status=response.status,
        )
    if not response.body:
        raise FetchError(f"Empty response while downloading '{url}'.", url=url)
    handle, name = tempfile.mkstemp(prefix="fontsmith-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(handle, "wb") as stream:
            stream.write(response.body)
    except OSError:
        Path(name).unlink(missing_ok=True)
        raise
    return Path(name)


__all__ = [
    "FetchResponse",
    "Fetcher",
    "HttpFetcher",
    "absolute_url",
    "download_to_temp",
]
