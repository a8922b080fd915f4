"""Ludusavi, the tool that knows where games keep their saves"""

import json
import os
import subprocess
from typing import Optional

from cloudsync import settings
from cloudsync.exceptions import ToolExecutionError
from cloudsync.util import system
from cloudsync.util.log import logger

LUDUSAVI_EXECUTABLE = "ludusavi"


class LudusaviBackupTool:
    """Copies the saves of a game into a directory by running the ludusavi CLI"""

    def __init__(
        self,
        binary_path: Optional[str] = None,
        config_dir: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.binary_path = binary_path or settings.LUDUSAVI_PATH or system.find_executable(LUDUSAVI_EXECUTABLE)
        self.config_dir = config_dir or settings.LUDUSAVI_CONFIG_DIR
        self.timeout = timeout if timeout is not None else settings.LUDUSAVI_TIMEOUT

    def get_backup_command(self, object_id, backup_path, wine_prefix=None, preview=False):
        command = [self.binary_path, "--config", self.config_dir, "backup", object_id, "--api", "--force"]
        if preview:
            command.append("--preview")
        if backup_path:
            command += ["--path", backup_path]
        if wine_prefix:
            command += ["--wine-prefix", wine_prefix]
        return command

    def backup_game(self, shop, object_id, backup_path, wine_prefix=None, preview=False):
        """Copy the current saves of a game to backup_path.

        The game is looked up by its object id in ludusavi's manifest; the shop is
        only used for reporting. Returns the report ludusavi prints in API mode.
        """
        if not self.binary_path or not system.path_exists(self.binary_path):
            raise ToolExecutionError("ludusavi could not be found, set 'ludusavi_path' in the settings")
        os.makedirs(self.config_dir, exist_ok=True)

        command = self.get_backup_command(object_id, backup_path, wine_prefix, preview)
        logger.info("Backing up saves of %s-%s with ludusavi", shop, object_id)
        try:
            returncode, stdout, stderr = system.execute_with_returncode(command, timeout=self.timeout)
        except subprocess.TimeoutExpired as ex:
            raise ToolExecutionError(
                "ludusavi did not finish the backup of %s-%s in %s seconds" % (shop, object_id, self.timeout)
            ) from ex
        except OSError as ex:
            raise ToolExecutionError("Could not run ludusavi: %s" % ex) from ex

        if returncode != 0:
            logger.error("ludusavi exited with code %s: %s", returncode, stderr)
            raise ToolExecutionError(
                "ludusavi failed to back up %s-%s" % (shop, object_id),
                returncode=returncode,
                stderr=stderr,
            )

        try:
            return json.loads(stdout) if stdout else {}
        except json.JSONDecodeError:
            logger.warning("Unexpected ludusavi output: %s", stdout[:200])
            return {}
