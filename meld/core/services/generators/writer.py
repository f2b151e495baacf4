"""
Generated-file writer — materialize generator output under the hub.

Each file is written atomically (temp file in the same directory,
then rename) so a crash never leaves a half-written settings file.
The set of files as a whole is not transactional; re-running
generation repairs an interrupted pass.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from meld.core.models.template import GeneratedFile

logger = logging.getLogger(__name__)


def write_generated_files(
    hub_dir: Path,
    files: list[GeneratedFile],
    dry_run: bool = False,
) -> list[GeneratedFile]:
    """Write ``files`` below ``hub_dir``.

    Args:
        hub_dir: Hub root; file paths are relative to it.
        files: Files to write, in order (later files win on a path clash).
        dry_run: If True, write nothing and just return ``files``.

    Returns:
        The files passed in.
    """
    if dry_run:
        logger.debug("Dry run: skipping write of %d file(s)", len(files))
        return files

    for file in files:
        target = hub_dir / file.path
        _atomic_write(target, file.content)
        logger.debug("Wrote %s", target)

    logger.info("Wrote %d file(s) under %s", len(files), hub_dir)
    return files


def _atomic_write(path: Path, content: str | bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".meld_", suffix=".tmp")
    os.close(fd)
    tmp = Path(tmp_path)
    try:
        if isinstance(content, bytes):
            tmp.write_bytes(content)
        else:
            tmp.write_text(content, encoding="utf-8")
        # mkstemp creates 0600; keep the existing file's mode or the umask default
        tmp.chmod(mode)
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask
