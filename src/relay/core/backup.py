"""Timestamped backups of native config files.

Backups sit next to the original as ``<name>.bak.<YYYYmmddTHHMMSS.ffffff>``,
so sorting the names sorts them by creation time and no index file is needed.
Two backups in the same microsecond get a ``-N`` counter after the stamp.
"""

from __future__ import annotations

import filecmp
import logging
import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from relay.core.errors import DocumentIOError, NoBackupFoundError

logger = logging.getLogger(__name__)

BACKUP_INFIX = ".bak."
_STAMP_FORMAT = "%Y%m%dT%H%M%S.%f"
_STAMP = re.compile(r"^(\d{8}T\d{6}\.\d{6})(?:-(\d+))?$")


@dataclass(frozen=True)
class BackupInfo:
    path: Path
    modified: datetime
    size: int


def list_backups(path: Path) -> list[Path]:
    """Backups of path, oldest first."""
    prefix = path.name + BACKUP_INFIX
    if not path.parent.is_dir():
        return []
    found: list[tuple[tuple[str, int], Path]] = []
    for p in path.parent.iterdir():
        if not p.name.startswith(prefix) or not p.is_file():
            continue
        match = _STAMP.match(p.name[len(prefix) :])
        if match is None:
            continue
        found.append(((match.group(1), int(match.group(2) or 0)), p))
    return [p for _, p in sorted(found)]


def backup_info(path: Path) -> list[BackupInfo]:
    infos = []
    for backup in list_backups(path):
        stat = backup.stat()
        infos.append(BackupInfo(backup, datetime.fromtimestamp(stat.st_mtime), stat.st_size))
    return infos


def _new_backup_path(path: Path) -> Path:
    stamp = datetime.now().strftime(_STAMP_FORMAT)
    candidate = path.with_name(f"{path.name}{BACKUP_INFIX}{stamp}")
    counter = 0
    while candidate.exists():
        counter += 1
        candidate = path.with_name(f"{path.name}{BACKUP_INFIX}{stamp}-{counter}")
    return candidate


def create_backup(path: Path) -> Path | None:
    """Copy path to a new backup.

    Returns None without copying when path does not exist, or when its bytes
    equal the most recent backup. Only the latest backup is compared, so
    reverting a file to an older state still produces a new backup.
    """
    if not path.is_file():
        return None

    existing = list_backups(path)
    try:
        if existing and filecmp.cmp(path, existing[-1], shallow=False):
            logger.debug("Backup skipped, %s unchanged since %s", path, existing[-1].name)
            return None
        backup = _new_backup_path(path)
        shutil.copy2(path, backup)
    except OSError as e:
        raise DocumentIOError(path, e) from e

    logger.info("Backed up %s to %s", path, backup.name)
    return backup


def restore_backup(path: Path) -> Path:
    """Overwrite path with its most recent backup and return that backup."""
    backups = list_backups(path)
    if not backups:
        raise NoBackupFoundError(path)
    latest = backups[-1]

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        os.close(fd)
        shutil.copy2(latest, tmp_name)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name:
            Path(tmp_name).unlink(missing_ok=True)
        raise DocumentIOError(path, e) from e

    logger.info("Restored %s from %s", path, latest.name)
    return latest


def rotate_backups(path: Path, keep: int) -> list[Path]:
    """Delete all but the newest keep backups; returns what was deleted."""
    backups = list_backups(path)
    stale = backups[: max(len(backups) - keep, 0)]
    deleted: list[Path] = []
    for backup in stale:
        try:
            backup.unlink()
        except OSError as e:
            raise DocumentIOError(backup, e) from e
        deleted.append(backup)
        logger.debug("Deleted old backup %s", backup)
    return deleted
