"""Whole-file reads and atomic writes for golden and test-data artifacts."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

GOLDEN_ENCODING = "utf-8"


def read_text(path: Path, encoding: str = GOLDEN_ENCODING) -> str:
    """Read a text artifact, converting line separators to ``\\n``.

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, "r", encoding=encoding, newline=None) as f:
        return f.read()


def atomic_write_text(path: Path, text: str, encoding: str = GOLDEN_ENCODING) -> None:
    """Atomically replace ``path`` with ``text`` (temp file + rename).

    The temp file is created in the target directory so ``os.replace`` stays
    on one filesystem and readers never observe a partial write. An existing
    file keeps its permission bits.

    Raises:
        OSError: If the write or rename fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
        if path.exists():
            shutil.copymode(path, tmp_path)
        else:
            os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def rewrite_if_changed(path: Path, old_text: str, new_text: str) -> bool:
    """Write ``new_text`` only when it differs from ``old_text``.

    Returns True when the file was touched.
    """
    if new_text == old_text:
        return False
    atomic_write_text(path, new_text)
    return True


def _current_umask() -> int:
    # os.umask can only be read by setting it.
    mask = os.umask(0)
    os.umask(mask)
    return mask
