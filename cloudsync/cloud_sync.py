"""Cloud backups of game saves

Ties the pieces together: a backup of the saves is made with the backup tool,
packed into an archive, and the archive is uploaded to a URL handed out by the API.
"""

import socket
import sys
import threading
from contextlib import contextmanager
from datetime import datetime
from gettext import gettext as _
from typing import Callable, Dict, Optional, Tuple

from cloudsync.api import CloudSyncApi
from cloudsync.backup import BackupTool, bundle_backup
from cloudsync.exceptions import SubscriptionRequiredError
from cloudsync.games import GameIdentity, GameStore
from cloudsync.ludusavi import LudusaviBackupTool
from cloudsync.upload import UploadMetadata, UploadProgress, resolve_wine_prefix, upload_artifact
from cloudsync.util.jobs import AsyncCall
from cloudsync.util.log import logger
from cloudsync.util.strings import format_date
from cloudsync.util.wine.prefix import RegistryParser, get_windows_like_user_profile_path
from cloudsync.util.wine.registry import WineRegistryParser


class CloudSync:
    """Backs up game saves to the cloud"""

    def __init__(
        self,
        api: Optional[CloudSyncApi] = None,
        backup_tool: Optional[BackupTool] = None,
        game_store: Optional[GameStore] = None,
        registry_parser: Optional[RegistryParser] = None,
        backups_dir: Optional[str] = None,
        platform: Optional[str] = None,
    ) -> None:
        self.api = api or CloudSyncApi()
        self.backup_tool = backup_tool or LudusaviBackupTool()
        self.game_store = game_store or GameStore()
        self.registry_parser = registry_parser or WineRegistryParser()
        self.backups_dir = backups_dir
        self.platform = platform or sys.platform
        self._identity_locks: Dict[GameIdentity, Tuple[threading.Lock, int]] = {}
        self._locks_lock = threading.Lock()

    @contextmanager
    def _identity_lock(self, identity: GameIdentity):
        """Hold the lock of a game; a lock is dropped once no thread holds or waits for it"""
        with self._locks_lock:
            lock, users = self._identity_locks.get(identity, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._identity_locks[identity] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._locks_lock:
                lock, users = self._identity_locks[identity]
                if users == 1:
                    del self._identity_locks[identity]
                else:
                    self._identity_locks[identity] = (lock, users - 1)

    def get_windows_like_user_profile_path(self, wine_prefix: Optional[str] = None) -> str:
        return get_windows_like_user_profile_path(
            wine_prefix, registry_parser=self.registry_parser, platform=self.platform
        )

    @staticmethod
    def get_backup_label(automatic: bool) -> str:
        """Return the name given to a backup made now"""
        date = format_date(datetime.now())
        if automatic:
            return _("Automatic backup from {date}").format(date=date)
        return _("Backup from {date}").format(date=date)

    def upload_save_game(
        self,
        object_id: str,
        shop: str,
        download_option_title: Optional[str] = None,
        label: Optional[str] = None,
        on_progress: Optional[Callable[[UploadProgress], None]] = None,
    ) -> None:
        """Back up the saves of a game and upload them.

        Backups of the same game run one at a time; different games may be
        backed up in parallel from several threads.
        """
        if not self.api.has_active_subscription():
            raise SubscriptionRequiredError()

        identity = GameIdentity(shop=shop, object_id=object_id)
        with self._identity_lock(identity):
            logger.info("Starting cloud backup of %s", identity)
            wine_prefix = self.game_store.get_wine_prefix(identity)
            # Environment errors must surface before the backup tool runs
            resolve_wine_prefix(wine_prefix)
            home_dir = self.get_windows_like_user_profile_path(wine_prefix)
            artifact = bundle_backup(
                identity, wine_prefix=wine_prefix, backup_tool=self.backup_tool, backups_dir=self.backups_dir
            )
            metadata = UploadMetadata(
                identity=identity,
                hostname=socket.gethostname(),
                home_dir=home_dir,
                platform=self.platform,
                wine_prefix=wine_prefix,
                download_option_title=download_option_title,
                label=label,
            )
            upload_artifact(artifact, metadata, api=self.api, on_progress=on_progress)

    def upload_save_game_async(
        self,
        object_id: str,
        shop: str,
        download_option_title: Optional[str] = None,
        label: Optional[str] = None,
        callback: Optional[Callable] = None,
    ) -> AsyncCall:
        """Run upload_save_game in a thread; callback receives (result, error) once done"""
        return AsyncCall(self.upload_save_game, callback, object_id, shop, download_option_title, label)
