"""Scoped temporary files for staged copies of nested archives."""

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

STAGING_PREFIX = "nestzip-"


@contextmanager
def staged_copy(directory: Optional[Path] = None, suffix: str = ".zip") -> Iterator[Path]:
    """Allocate an empty temporary file and remove it when the block exits.

    The file is removed whether the block completes or raises.

    Args:
        directory: Where to create the file (system temp dir if None)
        suffix: File name suffix

    Yields:
        Path of the temporary file
    """
    fd, name = tempfile.mkstemp(prefix=STAGING_PREFIX, suffix=suffix, dir=directory)
    os.close(fd)
    path = Path(name)
    logger.debug(f"Allocated staged copy {path}")
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug(f"Removed staged copy {path}")
