"""
Artifact download — fetch a tarball and unpack it in place.

Used once during bootstrap for the helper tools bundle
(``otool``/``install_name_tool``) that bottles need for relocation.

The archive is extracted into a staging directory next to ``dest``
and only moved into ``dest`` once every member has been written, so
a failed download never leaves a partial bundle behind.
"""

from __future__ import annotations

import gzip
import logging
import os
import shutil
import tarfile
import tempfile
import urllib.request
import zlib
from pathlib import Path

logger = logging.getLogger(__name__)


def download_and_extract(url: str, dest: Path) -> None:
    """Download the gzipped tarball at ``url`` and extract it into ``dest``.

    Raises:
        OSError: network or filesystem failure (``URLError`` included).
        tarfile.TarError: the payload is not a readable tarball, or is
            truncated or corrupt.
    """
    dest.mkdir(parents=True, exist_ok=True)
    logger.info("Downloading %s", url)

    req = urllib.request.Request(url, headers={"User-Agent": "brewdeps"})
    with tempfile.TemporaryFile() as tmp:
        with urllib.request.urlopen(req) as resp:
            shutil.copyfileobj(resp, tmp)
        tmp.seek(0)

        with tempfile.TemporaryDirectory(prefix=".brewdeps-", dir=dest.parent) as staging:
            try:
                with tarfile.open(fileobj=tmp, mode="r:gz") as tar:
                    tar.extractall(staging, filter="data")
                    # Read to the gzip trailer: a stream cut at a member
                    # boundary otherwise passes as a shorter archive
                    tar.fileobj.read()
            except (EOFError, zlib.error, gzip.BadGzipFile) as e:
                raise tarfile.ReadError(f"Truncated or corrupt archive from {url}: {e}") from e
            _move_contents(Path(staging), dest)

    logger.info("Extracted %s into %s", url, dest)


def _move_contents(src: Path, dest: Path) -> None:
    """Move every entry of ``src`` into ``dest``, replacing same-named files."""
    for entry in src.iterdir():
        target = dest / entry.name
        if entry.is_dir() and not entry.is_symlink():
            shutil.copytree(entry, target, symlinks=True, dirs_exist_ok=True)
        else:
            os.replace(entry, target)
