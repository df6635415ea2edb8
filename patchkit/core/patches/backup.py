###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

"""
Backup Manager.

One full copy of the target is taken per run, before any module is
attempted. Backup names carry a second-resolution timestamp, so two runs
within the same second collide; in that case the backup fails instead of
overwriting the earlier copy.
"""

import filecmp
import os
import shutil
from datetime import datetime
from typing import Callable, Optional

from patchkit.core.patches.errors import TargetFileError
from patchkit.core.utils import logger

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def backup_path_for(path: str, when: datetime) -> str:
    return f"{path}.backup.{when.strftime(BACKUP_TIMESTAMP_FORMAT)}"


def create_backup(path: str, now: Optional[Callable[[], datetime]] = None) -> str:
    """
    Copy `path` to `<path>.backup.<YYYYMMDD_HHMMSS>` and return the backup path.

    The copy is compared byte-for-byte with the source before returning.
    Any failure raises TargetFileError.
    """
    when = (now or datetime.now)()
    backup_path = backup_path_for(path, when)

    if os.path.exists(backup_path):
        raise TargetFileError(f"Failed to create backup: {backup_path} already exists")

    try:
        shutil.copy2(path, backup_path)
        identical = filecmp.cmp(path, backup_path, shallow=False)
    except OSError as e:
        raise TargetFileError(f"Failed to create backup: {e}") from e

    if not identical:
        raise TargetFileError(f"Failed to create backup: {backup_path} differs from {path}")

    logger.info(f"Backup created: {backup_path}")
    return backup_path
