"""Wine prefix helpers"""

import os
import sys
from typing import List, Optional, Protocol

from cloudsync.exceptions import KeyNotFoundError, MissingPrefixError, RegistryReadError, ValueNotFoundError
from cloudsync.util.log import logger
from cloudsync.util.system import normalize_path
from cloudsync.util.wine.registry import RegistryEntry, WineRegistryParser

# Platforms where Windows games run through Wine
WINE_PLATFORMS = ("linux",)

USER_REGISTRY_FILENAME = "user.reg"
VOLATILE_ENVIRONMENT_KEY = "Volatile Environment"
USER_PROFILE_VARIABLE = "USERPROFILE"


class RegistryParser(Protocol):
    def parse(self, content: str) -> List[RegistryEntry]:
        ...


def read_user_registry(wine_prefix: str) -> str:
    """Return the text of the user registry of a prefix"""
    reg_filename = os.path.join(wine_prefix, USER_REGISTRY_FILENAME)
    try:
        with open(reg_filename, "r", encoding="utf-8", errors="replace") as reg_file:
            return reg_file.read()
    except OSError as ex:
        raise RegistryReadError(filename=reg_filename) from ex


def get_windows_like_user_profile_path(
    wine_prefix: Optional[str] = None,
    registry_parser: Optional[RegistryParser] = None,
    platform: Optional[str] = None,
) -> str:
    """Return the home directory games see, in a normalized form.

    On Windows and macOS this is the user's own home directory. Where games run through Wine,
    it is the %USERPROFILE% of the prefix, as Wine records it in the volatile environment
    of the user registry; this is a Windows path such as 'C:/users/steamuser'.
    """
    platform = platform or sys.platform
    if platform not in WINE_PLATFORMS:
        return normalize_path(os.path.expanduser("~"))

    if not wine_prefix:
        raise MissingPrefixError()

    content = read_user_registry(wine_prefix)
    entries = (registry_parser or WineRegistryParser()).parse(content)
    volatile_environment = next((entry for entry in entries if entry.path == VOLATILE_ENVIRONMENT_KEY), None)
    if not volatile_environment:
        raise KeyNotFoundError(key=VOLATILE_ENVIRONMENT_KEY)

    user_profile = volatile_environment.values.get(USER_PROFILE_VARIABLE)
    if not user_profile:
        raise ValueNotFoundError(key=VOLATILE_ENVIRONMENT_KEY, value_name=USER_PROFILE_VARIABLE)

    logger.debug("User profile of prefix %s is %s", wine_prefix, user_profile)
    return normalize_path(user_profile)
