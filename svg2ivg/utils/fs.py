"""Filesystem helpers: YAML loading and atomic binary writes.

Usage::

    from svg2ivg.utils import fs
    data = fs.load_yaml("converter.yaml")
    fs.atomic_write_bytes("out/home.ivg", icon_bytes)

All paths go through ``pathlib.Path``.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

import yaml


def load_yaml(path: str | Path) -> Any:
    """Load a YAML file with ``yaml.safe_load``.

    Parameters
    ----------
    path : str | Path
        YAML file path.

    Returns
    -------
    Any
        Parsed content (``None`` for an empty file).

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    yaml.YAMLError
        If the document is not valid YAML.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def atomic_write_bytes(path: str | Path, data: bytes) -> None:
    """Write *data* to *path* atomically (tmp -> fsync -> rename).

    The temporary file lives in the target directory so the final
    ``os.replace`` stays on one filesystem.  Readers see either the old
    file or the complete new one.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
