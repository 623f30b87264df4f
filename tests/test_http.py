from __future__ import annotations

from pathlib import Path

import pytest
import requests

from fontsmith.core.config import DEFAULT_USER_AGENT
from fontsmith.core.exceptions import FetchError, TLSCertificateError
from fontsmith.core.filesystem import LocalFilesystem, ensure_dir
from fontsmith.core.http import FetchResponse, HttpFetcher, absolute_url, download_to_temp


class DummyResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"body") -> None:
        self.status_code = status_code
        self.content = content
        self.headers = {"Content-Type": "text/css"}


class DummySession:
    def __init__(self, response: DummyResponse | None = None, error: Exception | None = None):
        self.response = response or DummyResponse()
        self.error = error
        self.calls: list[tuple[str, dict, float]] = []

    def get(self, url: str, *, headers: dict, timeout: float):
        self.calls.append((url, headers, timeout))
        if self.error is not None:
            raise self.error
        return self.response


class StaticFetcher:
    def __init__(self, response: FetchResponse) -> None:
        self.response = response

    def fetch(self, url: str, *, user_agent: str | None = None) -> FetchResponse:
        return self.response


def test_fetch_sends_browser_user_agent() -> None:
    session = DummySession()
    fetcher = HttpFetcher(session=session, timeout=3.0)  # type: ignore[arg-type]

    response = fetcher.fetch("//fonts.googleapis.com/css2?family=Inter")

    url, headers, timeout = session.calls[0]
    assert url == "https://fonts.googleapis.com/css2?family=Inter"
    assert headers == {"User-Agent": DEFAULT_USER_AGENT}
    assert timeout == 3.0
    assert response.ok
    assert response.text == "body"
    assert response.headers == {"Content-Type": "text/css"}


def test_fetch_wraps_transport_errors() -> None:
    fetcher = HttpFetcher(session=DummySession(error=requests.ConnectionError("down")))  # type: ignore[arg-type]

    with pytest.raises(FetchError) as excinfo:
        fetcher.fetch("https://cdn.example/a.woff2")
    assert excinfo.value.url == "https://cdn.example/a.woff2"


def test_fetch_reports_tls_failures() -> None:
    fetcher = HttpFetcher(session=DummySession(error=requests.exceptions.SSLError("bad cert")))  # type: ignore[arg-type]

    with pytest.raises(TLSCertificateError):
        fetcher.fetch("https://cdn.example/a.woff2")


def test_absolute_url() -> None:
    assert absolute_url("//cdn.example/a") == "https://cdn.example/a"
    assert absolute_url("http://cdn.example/a") == "http://cdn.example/a"


def test_download_to_temp_writes_body(tmp_path: Path) -> None:
    path = download_to_temp(
        StaticFetcher(FetchResponse(status=200, body=b"font")), "https://x", directory=tmp_path
    )

    assert path.parent == tmp_path
    assert path.read_bytes() == b"font"


@pytest.mark.parametrize("response", [FetchResponse(404, b"missing"), FetchResponse(200, b"")])
def test_download_to_temp_rejects_bad_responses(tmp_path: Path, response: FetchResponse) -> None:
    with pytest.raises(FetchError):
        download_to_temp(StaticFetcher(response), "https://x", directory=tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_local_filesystem_move_respects_overwrite(tmp_path: Path) -> None:
    fs = LocalFilesystem()
    source = tmp_path / "a"
    target = tmp_path / "b"
    source.write_text("new", encoding="utf-8")
    target.write_text("old", encoding="utf-8")

    assert fs.move(source, target) is False
    assert fs.move(source, target, True) is True
    assert target.read_text(encoding="utf-8") == "new"
    assert not source.exists()


def test_ensure_dir_reports_files_in_the_way(tmp_path: Path) -> None:
    fs = LocalFilesystem()
    blocker = tmp_path / "fonts"
    blocker.write_text("", encoding="utf-8")

    assert ensure_dir(fs, tmp_path / "created" / "nested") is True
    assert ensure_dir(fs, blocker) is False


def test_content_type_ignores_header_case_and_parameters() -> None:
    response = FetchResponse(200, b"", headers={"content-TYPE": "Text/CSS; charset=utf-8"})

    assert response.content_type == "text/css"
    assert FetchResponse(200, b"").content_type == ""
