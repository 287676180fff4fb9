# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/core/file_ops.py
"""
Transient file utilities.

The rules artifact lives for exactly one invocation: it is written into a
private temporary directory under its final file name (guest copy tools keep
the local basename) and removed together with that directory on every exit
path.
"""

from __future__ import annotations

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional


@contextmanager
def transient_artifact(
    filename: str,
    content: str,
    *,
    dir: Optional[Path] = None,
    prefix: str = "kvm-persistent-net.",
) -> Generator[Path, None, None]:
    """
    Context manager yielding the path of a freshly written text file.

    Args:
        filename: Basename of the artifact (must not contain a path separator)
        content: Text written to the artifact (UTF-8)
        dir: Parent for the private temp directory (default: system temp dir)
        prefix: Prefix of the private temp directory name

    Yields:
        Path to the written artifact

    Raises:
        ValueError: filename is not a plain basename
        OSError: the artifact could not be created or written

    Example:
        with transient_artifact("70-persistent-net.rules", text) as path:
            deliver(path)
        # path and its directory no longer exist
    """
    if not filename or Path(filename).name != filename or filename in (".", ".."):
        raise ValueError(f"artifact name must be a plain file name: {filename!r}")

    workdir = Path(tempfile.mkdtemp(prefix=prefix, dir=str(dir) if dir else None))
    try:
        artifact = workdir / filename
        artifact.write_text(content, encoding="utf-8")
        yield artifact
    finally:
        shutil.rmtree(workdir, ignore_errors=True)
