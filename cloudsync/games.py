"""Game identities and their locally stored configuration"""

import os
from dataclasses import dataclass
from enum import Enum
from gettext import gettext as _
from typing import Optional

import yaml

from cloudsync import settings
from cloudsync.exceptions import InvalidGameError
from cloudsync.util.log import logger


class GameShop(str, Enum):
    """Storefronts games are acquired from"""

    STEAM = "steam"
    EPIC = "epic"
    GOG = "gog"
    CUSTOM = "custom"


@dataclass(frozen=True)
class GameIdentity:
    """A game, identified by its id within a shop.

    Attributes:
        shop: The shop name, e.g. 'steam'
        object_id: The id of the game in that shop
    """

    shop: str
    object_id: str

    def __post_init__(self) -> None:
        if isinstance(self.shop, GameShop):
            object.__setattr__(self, "shop", self.shop.value)
        for name in ("shop", "object_id"):
            value = getattr(self, name)
            if not value:
                raise InvalidGameError(_("A game needs a {}").format(name))
            if "/" in value or "\\" in value or value in (".", ".."):
                raise InvalidGameError(_("Invalid {} '{}'").format(name, value))

    @property
    def slug(self) -> str:
        """Name used for the files belonging to this game"""
        return "%s-%s" % (self.shop, self.object_id)

    def __str__(self) -> str:
        return self.slug


class GameStore:
    """Game configurations, one YAML file per game"""

    def __init__(self, config_dir: Optional[str] = None) -> None:
        self.config_dir = config_dir or settings.GAME_CONFIG_DIR

    def get_config_path(self, identity: GameIdentity) -> str:
        return os.path.join(self.config_dir, "%s.yml" % identity.slug)

    def get(self, identity: GameIdentity) -> Optional[dict]:
        """Return the configuration of a game, None if the game is unknown.
        A file that isn't valid YAML counts as an empty configuration."""
        config_path = self.get_config_path(identity)
        if not os.path.isfile(config_path):
            return None
        with open(config_path, "r", encoding="utf-8") as config_file:
            try:
                config = yaml.safe_load(config_file)
            except yaml.YAMLError as ex:
                logger.error("Invalid configuration for %s in %s: %s", identity, config_path, ex)
                return {}
        return config if isinstance(config, dict) else {}

    def save(self, identity: GameIdentity, config: dict) -> None:
        """Write the configuration of a game, replacing the previous file atomically"""
        os.makedirs(self.config_dir, exist_ok=True)
        config_path = self.get_config_path(identity)
        temp_path = config_path + ".tmp"
        try:
            with open(temp_path, "w", encoding="utf-8") as config_file:
                yaml.safe_dump(config, config_file, default_flow_style=False)
            os.replace(temp_path, config_path)
        finally:
            if os.path.isfile(temp_path):
                os.unlink(temp_path)

    def get_wine_prefix(self, identity: GameIdentity) -> Optional[str]:
        """Return the Wine prefix configured for a game, if any"""
        config = self.get(identity)
        if config is None:
            logger.debug("No configuration for %s", identity)
            return None
        return config.get("wine_prefix_path") or None

    def set_wine_prefix(self, identity: GameIdentity, wine_prefix: Optional[str]) -> None:
        config = self.get(identity) or {}
        config["wine_prefix_path"] = wine_prefix
        self.save(identity, config)
