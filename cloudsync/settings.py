"""Internal settings."""

import os

from cloudsync import __version__
from cloudsync.util.log import CACHE_DIR as LOG_CACHE_DIR
from cloudsync.util.settings import SettingsIO

PROJECT = "cloudsync"
VERSION = __version__


def _xdg_dir(variable, default):
    return os.environ.get(variable) or os.path.expanduser(default)


# Paths
CONFIG_DIR = os.path.join(_xdg_dir("XDG_CONFIG_HOME", "~/.config"), "cloudsync")
DATA_DIR = os.path.join(_xdg_dir("XDG_DATA_HOME", "~/.local/share"), "cloudsync")
CONFIG_FILE = os.path.join(CONFIG_DIR, "cloudsync.conf")
sio = SettingsIO(CONFIG_FILE)

CACHE_DIR = sio.read_setting("cache_dir") or LOG_CACHE_DIR
BACKUPS_DIR = sio.read_setting("backups_dir") or os.path.join(DATA_DIR, "backups")
GAME_CONFIG_DIR = os.path.join(CONFIG_DIR, "games")

API_URL = sio.read_setting("api_url") or "https://hydra-api-us-east-1.losbroxas.org"
API_KEY_FILE_PATH = os.path.join(CACHE_DIR, "auth-token")
USER_INFO_FILE_PATH = os.path.join(CACHE_DIR, "user.json")

HTTP_TIMEOUT = sio.read_float_setting("http_timeout", default=30)
# No default limit: save archives can be large and home connections slow
UPLOAD_TIMEOUT = sio.read_float_setting("upload_timeout")

LUDUSAVI_PATH = sio.read_setting("ludusavi_path")
LUDUSAVI_CONFIG_DIR = sio.read_setting("ludusavi_config_dir") or os.path.join(DATA_DIR, "ludusavi")
LUDUSAVI_TIMEOUT = sio.read_float_setting("ludusavi_timeout")
