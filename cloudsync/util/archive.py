"""Packing of directories into tar archives"""

import os
import tarfile

from cloudsync.util.log import logger

FILE_MODE = 0o644
DIRECTORY_MODE = 0o755


def list_directory_tree(path):
    """Return the relative paths of everything under path, sorted, with directories
    listed before their contents."""
    members = []
    for root, dirs, files in os.walk(path):
        dirs.sort()
        relroot = os.path.relpath(root, path)
        for name in sorted(dirs + files):
            members.append(os.path.normpath(os.path.join(relroot, name)))
    return sorted(members, key=lambda member: member.split(os.sep))


def _normalize_member(tarinfo):
    tarinfo.mtime = 0
    tarinfo.uid = tarinfo.gid = 0
    tarinfo.uname = tarinfo.gname = ""
    tarinfo.mode = DIRECTORY_MODE if tarinfo.isdir() else FILE_MODE
    return tarinfo


def create_tar_archive(source_dir, dest):
    """Pack the content of source_dir into an uncompressed tar file at dest.

    Members are named relative to source_dir and stored in a fixed order with
    their timestamps, owners and permissions reset, so the same files always
    produce the same archive.
    """
    members = list_directory_tree(source_dir)
    logger.debug("Packing %d entries from %s into %s", len(members), source_dir, dest)
    with tarfile.open(dest, "w", format=tarfile.GNU_FORMAT) as archive:
        for member in members:
            archive.add(
                os.path.join(source_dir, member),
                arcname=member.replace(os.sep, "/"),
                recursive=False,
                filter=_normalize_member,
            )
    return dest
