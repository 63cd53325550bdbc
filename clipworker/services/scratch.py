"""Per-request scratch files.

Each request gets its own input/output paths inside the shared scratch
directory. Names embed a millisecond timestamp plus a random suffix, so
concurrent requests never collide and never delete each other's files.
"""

import logging
import os
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


def ensure_scratch_dir(path) -> Path:
    scratch = Path(path)
    scratch.mkdir(parents=True, exist_ok=True)
    return scratch


def scratch_name(prefix: str, suffix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex}{suffix}"


def remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove scratch file %s: %s", path, e)


@contextmanager
def scratch_file(directory, prefix: str, suffix: str) -> Iterator[Path]:
    """Yield a fresh scratch path; the file is removed on exit if it exists."""
    path = Path(directory) / scratch_name(prefix, suffix)
    try:
        yield path
    finally:
        if os.path.exists(path):
            remove_quietly(path)
            logger.debug("Removed scratch file %s", path)
