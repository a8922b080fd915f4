"""Exception handling module"""

from gettext import gettext as _


class CloudSyncError(Exception):
    """Base exception for cloudsync related errors"""

    def __init__(self, message, *args, **kwarg):
        super().__init__(message, *args, **kwarg)
        self.message = message


class InvalidGameError(CloudSyncError):
    """Raised when a shop or game id can't name a game, e.g. when it is empty
    or would escape the backups directory."""


class EnvironmentResolutionError(CloudSyncError):
    """Raised when the user profile directory of a game can't be determined.
    This has subclasses that are less vague."""


class MissingPrefixError(EnvironmentResolutionError):
    """Raised when a Wine prefix is required on this platform but none was given."""

    def __init__(self, message=None, *args, **kwarg):
        super().__init__(message or _("A Wine prefix is required on this platform"), *args, **kwarg)


class RegistryReadError(EnvironmentResolutionError):
    """Raised when the user registry of a Wine prefix can't be read."""

    def __init__(self, message=None, filename=None, *args, **kwarg):
        if not message and filename:
            message = _("The registry file {} could not be read").format(filename)
        super().__init__(message, *args, **kwarg)
        self.filename = filename


class KeyNotFoundError(EnvironmentResolutionError):
    """Raised when a registry key is absent from a registry file."""

    def __init__(self, message=None, key=None, *args, **kwarg):
        if not message and key:
            message = _("The registry key '{}' was not found").format(key)
        super().__init__(message, *args, **kwarg)
        self.key = key


class ValueNotFoundError(EnvironmentResolutionError):
    """Raised when a registry key lacks a value, or the value is empty."""

    def __init__(self, message=None, key=None, value_name=None, *args, **kwarg):
        if not message and value_name:
            message = _("The value '{}' was not found in registry key '{}'").format(value_name, key)
        super().__init__(message, *args, **kwarg)
        self.key = key
        self.value_name = value_name


class PathResolutionError(EnvironmentResolutionError):
    """Raised when a configured path no longer exists on disk."""

    def __init__(self, message=None, path=None, *args, **kwarg):
        if not message and path:
            message = _("The path {} could not be resolved").format(path)
        super().__init__(message, *args, **kwarg)
        self.path = path


class AuthorizationError(CloudSyncError):
    """Raised when the remote service refuses to authorize an upload"""

    def __init__(self, message, status_code=None, *args, **kwarg):
        super().__init__(message, *args, **kwarg)
        self.status_code = status_code


class SubscriptionRequiredError(AuthorizationError):
    """Raised when cloud saves are used without an active subscription"""

    def __init__(self, message=None, *args, **kwarg):
        super().__init__(message or _("An active subscription is required for cloud saves"), *args, **kwarg)


class BackupError(CloudSyncError):
    """Raised when the local backup of a game can't be produced"""


class ToolExecutionError(BackupError):
    """Raised when the external backup tool fails or can't be run."""

    def __init__(self, message, returncode=None, stderr=None, *args, **kwarg):
        super().__init__(message, *args, **kwarg)
        self.returncode = returncode
        self.stderr = stderr


class ArchiveCreationError(BackupError):
    """Raised when the staging directory can't be packed into an archive."""


class TransferError(CloudSyncError):
    """Raised when the archive can't be sent to its upload URL"""

    def __init__(self, message, status_code=None, *args, **kwarg):
        super().__init__(message, *args, **kwarg)
        self.status_code = status_code
