from __future__ import annotations

from pathlib import Path
from unittest import mock

import pytest
import requests

from lottostats.fetcher import FetchError, build_http_session, download_file, file_exists


def _fake_session(*, ok: bool = True, chunks: list[bytes] | None = None, status: int = 200) -> mock.MagicMock:
    resp = mock.MagicMock()
    resp.ok = ok
    resp.status_code = status
    resp.reason = "OK" if ok else "Not Found"
    resp.iter_content.return_value = chunks or []
    resp.__enter__.return_value = resp

    session = mock.MagicMock()
    session.get.return_value = resp
    return session


def test_download_writes_file(tmp_path: Path) -> None:
    session = _fake_session(chunks=[b"CONCURSO,NPRODUCTO\n", b"1,40\n"])

    target = download_file("https://example.test/draws.csv", tmp_path / "data", "draws.csv", http=session, verify=False)

    assert target == tmp_path / "data" / "draws.csv"
    assert target.read_bytes() == b"CONCURSO,NPRODUCTO\n1,40\n"
    assert file_exists(tmp_path / "data", "draws.csv")
    _, kwargs = session.get.call_args
    assert kwargs["verify"] is False
    assert kwargs["stream"] is True


def test_http_error_status_raises_and_leaves_no_file(tmp_path: Path) -> None:
    session = _fake_session(ok=False, status=404)

    with pytest.raises(FetchError):
        download_file("https://example.test/missing.csv", tmp_path, "draws.csv", http=session)

    assert not file_exists(tmp_path, "draws.csv")
    assert not (tmp_path / "draws.csv.part").exists()


def test_network_error_raises_fetch_error(tmp_path: Path) -> None:
    session = mock.MagicMock()
    session.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(FetchError):
        download_file("https://example.test/draws.csv", tmp_path, "draws.csv", http=session)


def test_http_session_retries_transient_errors() -> None:
    session = build_http_session(retries=2, backoff_factor=0.1)

    retry = session.get_adapter("https://example.test").max_retries
    assert retry.total == 2
    assert 503 in retry.status_forcelist
