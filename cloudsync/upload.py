"""Upload of backup archives to the cloud"""

import os
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from cloudsync import settings
from cloudsync.api import CloudSyncApi
from cloudsync.backup import BackupArtifact
from cloudsync.exceptions import PathResolutionError, TransferError
from cloudsync.games import GameIdentity
from cloudsync.util import system
from cloudsync.util.log import logger
from cloudsync.util.notifications import NotificationSource

ARCHIVE_CONTENT_TYPE = "application/tar"
UPLOAD_CHUNK_SIZE = 64 * 1024

# Fired with (identity, UploadProgress) for each chunk sent
UPLOAD_PROGRESS = NotificationSource()
# Fired with (object_id, shop) once an archive is stored in the cloud
UPLOAD_COMPLETED = NotificationSource()


@dataclass
class UploadMetadata:
    """What the server is told about an archive besides its size"""

    identity: GameIdentity
    hostname: str
    home_dir: str
    platform: str
    wine_prefix: Optional[str] = None
    download_option_title: Optional[str] = None
    label: Optional[str] = None


@dataclass
class UploadProgress:
    loaded: int
    total: int

    @property
    def fraction(self) -> float:
        if not self.total:
            return 1.0
        return self.loaded / self.total


class ProgressReader:
    """File-like view of a buffer that reports each read as upload progress"""

    def __init__(self, data: bytes, callback: Callable[[UploadProgress], None], chunk_size=UPLOAD_CHUNK_SIZE):
        self.data = data
        self.callback = callback
        self.chunk_size = chunk_size
        self.position = 0

    def __len__(self):
        return len(self.data)

    def read(self, size=-1):
        if size is None or size < 0:
            size = self.chunk_size
        chunk = self.data[self.position:self.position + size]
        self.position += len(chunk)
        if chunk:
            self.callback(UploadProgress(loaded=self.position, total=len(self.data)))
        return chunk


def resolve_wine_prefix(wine_prefix: Optional[str]) -> Optional[str]:
    """Return the canonical absolute path of a prefix"""
    if not wine_prefix:
        return None
    if not os.path.exists(wine_prefix):
        raise PathResolutionError(path=wine_prefix)
    return os.path.realpath(wine_prefix)


def put_archive(upload_url: str, data: bytes, on_progress: Callable[[UploadProgress], None]) -> None:
    """Send an archive to a presigned URL"""
    try:
        response = requests.put(
            upload_url,
            data=ProgressReader(data, on_progress),
            headers={"Content-Type": ARCHIVE_CONTENT_TYPE},
            timeout=settings.UPLOAD_TIMEOUT,
        )
        response.raise_for_status()
    except requests.HTTPError as ex:
        raise TransferError("Upload refused: %s" % ex, status_code=ex.response.status_code) from ex
    except requests.RequestException as ex:
        raise TransferError("Upload failed: %s" % ex) from ex


def upload_artifact(
    artifact: BackupArtifact,
    metadata: UploadMetadata,
    api: Optional[CloudSyncApi] = None,
    on_progress: Optional[Callable[[UploadProgress], None]] = None,
) -> None:
    """Get an upload URL for an archive and send the archive there.

    The archive is deleted afterwards, whatever the outcome; errors from the
    upload itself are raised once it is gone.
    """
    api = api or CloudSyncApi()
    identity = metadata.identity

    def report_progress(progress: UploadProgress) -> None:
        logger.debug("Uploading %s: %d/%d bytes", identity, progress.loaded, progress.total)
        UPLOAD_PROGRESS.fire(identity, progress)
        if on_progress:
            try:
                on_progress(progress)
            except Exception as ex:  # pylint: disable=broad-except
                logger.exception("Progress callback failed: %s", ex)

    try:
        artifact.size_bytes = os.stat(artifact.archive_path).st_size
        authorization = api.request_upload(
            artifact_length=artifact.size_bytes,
            shop=identity.shop,
            object_id=identity.object_id,
            hostname=metadata.hostname,
            wine_prefix_path=resolve_wine_prefix(metadata.wine_prefix),
            home_dir=metadata.home_dir,
            download_option_title=metadata.download_option_title,
            platform=metadata.platform,
            label=metadata.label,
        )
        logger.info("Uploading %s as artifact %s", artifact.archive_path, authorization.artifact_id)
        with open(artifact.archive_path, "rb") as archive_file:
            data = archive_file.read()
        put_archive(authorization.upload_url, data, report_progress)
        UPLOAD_COMPLETED.fire(identity.object_id, identity.shop)
        logger.info("Upload of %s complete", identity)
    finally:
        if not system.delete_file(artifact.archive_path):
            logger.error("Failed to remove tar file %s", artifact.archive_path)
