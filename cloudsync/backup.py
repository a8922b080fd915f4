"""Local backups of game saves, packed for upload"""

import os
import tarfile
import uuid
from dataclasses import dataclass
from typing import Optional, Protocol

from cloudsync import settings
from cloudsync.exceptions import ArchiveCreationError, CloudSyncError, ToolExecutionError
from cloudsync.games import GameIdentity
from cloudsync.ludusavi import LudusaviBackupTool
from cloudsync.util import system
from cloudsync.util.archive import create_tar_archive
from cloudsync.util.log import logger
from cloudsync.util.strings import human_size


class BackupTool(Protocol):
    def backup_game(self, shop: str, object_id: str, backup_path: str, wine_prefix: Optional[str] = None):
        """Fill backup_path with the current saves of a game, or raise"""


@dataclass
class BackupArtifact:
    """An archive of a game's saves, waiting to be uploaded.

    Attributes:
        staging_path: Directory the backup tool wrote the saves to
        archive_path: Tar file made from the staging directory
        size_bytes: Size of the tar file
    """

    staging_path: str
    archive_path: str
    size_bytes: int = 0


def get_backup_path(identity: GameIdentity, backups_dir: Optional[str] = None) -> str:
    """Return the staging directory of a game; it is always the same for a given game"""
    return os.path.join(backups_dir or settings.BACKUPS_DIR, identity.slug)


def get_archive_path(backups_dir: Optional[str] = None) -> str:
    """Return a new, unique, archive location"""
    return os.path.join(backups_dir or settings.BACKUPS_DIR, "%s.tar" % uuid.uuid4())


def bundle_backup(
    identity: GameIdentity,
    wine_prefix: Optional[str] = None,
    backup_tool: Optional[BackupTool] = None,
    backups_dir: Optional[str] = None,
) -> BackupArtifact:
    """Back up the saves of a game and pack them in a tar archive.

    The staging directory left by a previous run is removed first so old files can't
    end up in the archive. It is kept after packing; the next run clears it.
    """
    backups_dir = backups_dir or settings.BACKUPS_DIR
    backup_path = get_backup_path(identity, backups_dir)

    if os.path.exists(backup_path) and not system.delete_folder(backup_path):
        logger.error("Failed to remove backup path %s", backup_path)

    backup_tool = backup_tool or LudusaviBackupTool()
    try:
        backup_tool.backup_game(identity.shop, identity.object_id, backup_path, wine_prefix)
    except CloudSyncError:
        raise
    except Exception as ex:
        raise ToolExecutionError("Backup of %s failed: %s" % (identity, ex)) from ex

    archive_path = get_archive_path(backups_dir)
    try:
        if not os.path.isdir(backup_path):
            # Nothing was saved; the archive is empty
            os.makedirs(backup_path)
        create_tar_archive(backup_path, archive_path)
        size_bytes = os.stat(archive_path).st_size
    except (OSError, tarfile.TarError) as ex:
        if os.path.exists(archive_path):
            system.delete_file(archive_path)
        raise ArchiveCreationError("Failed to pack %s: %s" % (backup_path, ex)) from ex

    logger.info("Backup of %s packed in %s (%s)", identity, archive_path, human_size(size_bytes))
    return BackupArtifact(staging_path=backup_path, archive_path=archive_path, size_bytes=size_bytes)
