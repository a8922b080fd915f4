"""Command line interface"""

import argparse
import locale
import sys

from cloudsync import __version__
from cloudsync.cloud_sync import CloudSync
from cloudsync.exceptions import CloudSyncError
from cloudsync.upload import UploadProgress
from cloudsync.util.log import logger, set_debug_mode


def print_progress(progress: UploadProgress) -> None:
    sys.stdout.write("\rUploading: %3d%%" % (progress.fraction * 100))
    if progress.loaded == progress.total:
        sys.stdout.write("\n")
    sys.stdout.flush()


def get_parser():
    parser = argparse.ArgumentParser(prog="cloudsync", description="Back up game saves to the cloud")
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    parser.add_argument("-d", "--debug", action="store_true", help="Show debug messages")
    subparsers = parser.add_subparsers(dest="command", required=True)

    upload_parser = subparsers.add_parser("upload", help="Back up the saves of a game and upload them")
    upload_parser.add_argument("shop", help="Shop the game comes from, e.g. steam")
    upload_parser.add_argument("object_id", help="Id of the game in the shop")
    upload_parser.add_argument("--download-option", help="Title of the download option the game was installed from")
    label_group = upload_parser.add_mutually_exclusive_group()
    label_group.add_argument("--label", help="Name of the backup")
    label_group.add_argument("--automatic", action="store_true", help="Name the backup as an automatic one")

    home_parser = subparsers.add_parser("home-dir", help="Print the home directory games see")
    home_parser.add_argument("--wine-prefix", help="Wine prefix the games run in")
    return parser


def main(argv=None):
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error as ex:
        logger.warning("Unable to set locale: %s", ex)
    args = get_parser().parse_args(argv)
    if args.debug:
        set_debug_mode()

    cloud_sync = CloudSync()
    try:
        if args.command == "upload":
            label = args.label
            if not label:
                label = CloudSync.get_backup_label(args.automatic)
            cloud_sync.upload_save_game(
                args.object_id,
                args.shop,
                download_option_title=args.download_option,
                label=label,
                on_progress=print_progress,
            )
        elif args.command == "home-dir":
            print(cloud_sync.get_windows_like_user_profile_path(args.wine_prefix))
    except CloudSyncError as ex:
        logger.error(ex.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
