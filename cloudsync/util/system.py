"""System utilities"""

import os
import posixpath
import shutil
import subprocess
from typing import Dict, List, Optional, Tuple

from cloudsync.util.log import logger


def get_environment():
    """Return a safe to use copy of the system's environment.
    Values starting with BASH_FUNC can cause issues when written in a text file."""
    return {key: value for key, value in os.environ.items() if not key.startswith("BASH_FUNC")}


def execute_with_returncode(
    command: List[str],
    env: Optional[Dict[str, str]] = None,
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Tuple[int, str, str]:
    """
    Execute a system command and wait for it to complete.

    Params:
        command (list): A list containing an executable and its parameters
        env (dict): Dict of values to add to the current environment
        cwd (str): Working directory
        timeout (int): Number of seconds the program is allowed to run, disabled by default

    Returns:
        int, str, str: exit code, stdout output and stderr output

    Raises:
        OSError: the program could not be started
        subprocess.TimeoutExpired: the program was killed after running for too long
    """
    logger.debug("Executing %s", " ".join([str(i) for i in command]))

    existing_env = get_environment()
    if env:
        env = {k: v for k, v in env.items() if v is not None}
        existing_env.update(env)

    with subprocess.Popen(
        command,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=existing_env,
        cwd=cwd,
        errors="replace",
    ) as command_process:
        try:
            stdout, stderr = command_process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.error("Command %s timed out after %s seconds", command, timeout)
            command_process.kill()
            command_process.communicate()
            raise
    return command_process.returncode, stdout.strip(), (stderr or "").strip()


def find_executable(exec_name: str) -> Optional[str]:
    """Return the absolute path of an executable, or None if
    it could not be found."""
    return shutil.which(exec_name) if exec_name else None


def path_exists(path: str, check_symlinks: bool = False, exclude_empty: bool = False) -> bool:
    """Wrapper around os.path.exists that doesn't crash with empty values

    Params:
        path (str): File to the file to check
        check_symlinks (bool): If the path is a broken symlink, return False
        exclude_empty (bool): If true, consider 0 bytes files as non existing
    """
    if not path:
        return False
    if path.startswith("~"):
        path = os.path.expanduser(path)
    if os.path.exists(path):
        if exclude_empty:
            return os.stat(path).st_size > 0
        return True
    if os.path.islink(path):
        logger.warning("%s is a broken link", path)
        return not check_symlinks
    return False


def normalize_path(path: str) -> str:
    """Return a canonical form of a path, Windows or Unix, using forward slashes.
    Redundant and trailing separators are dropped; symlinks are left alone."""
    return posixpath.normpath(path.replace("\\", "/"))


def delete_folder(path):
    """Delete a folder specified by path immediately.

    Returns true if the folder was successfully deleted.
    """
    if not os.path.exists(path):
        logger.warning("Non existent path: %s", path)
        return False
    if os.path.samefile(os.path.expanduser("~"), path):
        raise RuntimeError("cloudsync tried to erase home directory!")
    logger.debug("Deleting folder %s", path)
    try:
        shutil.rmtree(path)
    except OSError as ex:
        logger.error("Failed to delete folder %s: %s (Error code %s)", path, ex.strerror, ex.errno)
        return False
    return True


def delete_file(path):
    """Delete a file, logging rather than raising on failure.

    Returns true if the file was successfully deleted.
    """
    try:
        os.unlink(path)
    except FileNotFoundError:
        logger.warning("Non existent file: %s", path)
        return False
    except OSError as ex:
        logger.error("Failed to delete file %s: %s (Error code %s)", path, ex.strerror, ex.errno)
        return False
    logger.debug("Deleted %s", path)
    return True
