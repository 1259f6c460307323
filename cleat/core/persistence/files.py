"""
YAML file helpers — whole-file atomic rewrites for the per-user stores.

Writes go to a temp file in the same directory and are renamed over the
target, so a crash never leaves a half-written file behind. Concurrent
invocations of the tool may still lose each other's updates.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def read_yaml(path: Path) -> Any:
    """Parsed YAML content of ``path`` (None when the file does not exist).

    Raises:
        yaml.YAMLError: The file is not valid YAML.
        OSError: The file exists but cannot be read.
    """
    if not path.is_file():
        return None
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def write_yaml(path: Path, data: Any) -> None:
    """Atomically replace ``path`` with ``data`` serialized as YAML."""
    path.parent.mkdir(parents=True, exist_ok=True)
    content = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        tmp.replace(path)
        logger.debug("Wrote %s", path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
