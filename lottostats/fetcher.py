"""Download the published results file to a local path."""

from __future__ import annotations

import logging
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """The results file could not be downloaded."""


def build_http_session(retries: int = 3, backoff_factor: float = 0.3) -> requests.Session:
    """Create a requests session with retry/backoff for transient network errors."""

    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)

    session = requests.Session()
    session.headers.update({"User-Agent": "Mozilla/5.0"})
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def file_exists(directory: str | Path, file_name: str) -> bool:
    return (Path(directory) / file_name).exists()


def download_file(
    url: str,
    directory: str | Path,
    file_name: str,
    *,
    timeout: float = 30.0,
    verify: bool = True,
    http: requests.Session | None = None,
) -> Path:
    """Stream ``url`` into ``directory/file_name`` and return the path."""

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / file_name
    partial = target.with_name(target.name + ".part")

    session = http or build_http_session()
    try:
        with session.get(url, timeout=timeout, verify=verify, stream=True) as resp:
            if not resp.ok:
                raise FetchError(f"Download of {url} failed: {resp.status_code} {resp.reason}")
            with partial.open("wb") as fh:
                for chunk in resp.iter_content(chunk_size=64 * 1024):
                    if chunk:
                        fh.write(chunk)
    except requests.RequestException as exc:
        partial.unlink(missing_ok=True)
        raise FetchError(f"Download of {url} failed: {exc}") from exc
    except FetchError:
        partial.unlink(missing_ok=True)
        raise

    partial.replace(target)
    logger.info("Saved CSV file as %s in %s", file_name, target_dir)
    return target
