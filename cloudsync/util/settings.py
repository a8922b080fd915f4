import configparser
import os

from cloudsync.util.log import logger


class SettingsIO:
    """Read-only access to the [cloudsync] section of an ini file"""

    def __init__(self, config_file, section="cloudsync"):
        self.config_file = config_file
        self.section = section
        self.config = configparser.ConfigParser()

        if os.path.exists(self.config_file):
            try:
                self.config.read([self.config_file])
            except configparser.ParsingError as ex:
                logger.error("Failed to read config file %s: %s", self.config_file, ex)
            except UnicodeDecodeError as ex:
                logger.error("Some invalid characters are preventing the setting file from loading properly: %s", ex)

    def read_setting(self, key, default=""):
        """Return the value of key, or default when it isn't set"""
        return self.config.get(self.section, key, fallback=default)

    def read_float_setting(self, key, default=None):
        """Return a number of seconds or similar; an unset or malformed value gives default"""
        text = self.read_setting(key)
        if not text:
            return default
        try:
            return float(text)
        except ValueError:
            logger.error("Setting %s should be a number, got '%s'", key, text)
            return default
