"""Lightweight event channels used to report progress and completion"""

import threading
from typing import Callable, Dict, Optional, Tuple

from cloudsync.util.log import logger


class NotificationRegistration:
    """Represents a registered callback; can be used to remove the registration. Obtain this
    by calling NotificationSource.register; a null-object that represent no registration
    can be obtained via EMPTY_NOTIFICATION_REGISTRATION."""

    def __init__(self, notification_source: Optional["NotificationSource"], callback_id: int) -> None:
        self.notification_source = notification_source
        self.callback_id = callback_id

    @property
    def is_registered(self):
        """True if this registration is still registered; if false it has been unregistered and
        won't fire anymore."""
        return bool(self.notification_source and self.callback_id in self.notification_source._callbacks)

    def unregister(self) -> None:
        """Unregisters a callback that register() had registered."""
        if self.notification_source:
            with self.notification_source._lock:
                self.notification_source._callbacks.pop(self.callback_id, None)
            self.notification_source = None


# A singleton registration that is already unregistered; used as a null object
# rather than None, so you can omit the checks for None,
EMPTY_NOTIFICATION_REGISTRATION = NotificationRegistration(None, 0)


class NotificationSource:
    """A class to inform interested code of changes or of an event; these are usually global objects.

    The fire() method may be passed arguments, and these are passed on to any handlers. Handlers
    run on the thread that fires the notification, in priority order. A handler that raises is
    logged and skipped; firing never fails, so notifications can be sent from the middle of
    an upload without putting it at risk. Handlers should return quickly.
    """

    def __init__(self) -> None:
        self._callbacks: Dict[int, Tuple[Callable, int]] = {}
        self._next_callback_id = 1
        self._lock = threading.Lock()

    @property
    def has_handlers(self) -> bool:
        """True if any handlers are registered."""
        return bool(self._callbacks)

    def fire(self, *args, **kwargs) -> None:
        """Signals that the thing, whatever it is, has happened."""
        with self._lock:
            ordered = sorted(self._callbacks.values(), key=lambda t: t[1])
        for callback, _priority in ordered:
            try:
                callback(*args, **kwargs)
            except Exception as ex:  # pylint: disable=broad-except
                logger.exception("Notification handler %s failed: %s", callback, ex)

    def register(self, callback: Callable, priority: int = 0) -> NotificationRegistration:
        """Registers a callback to be called after the thing, whatever it is, has happened.
        The callbacks are called in priority order.

        Note that a callback will be kept alive until unregistered, and this can keep
        large objects alive until then.

        Returns registration object to use to unregister the callback."""

        # We still use callback ID numbers to avoid creating a circular reference.
        with self._lock:
            callback_id = self._next_callback_id
            self._callbacks[callback_id] = (callback, priority)
            self._next_callback_id += 1
        return NotificationRegistration(self, callback_id)
