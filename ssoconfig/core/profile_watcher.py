"""
SSOConfig - SSO session management for the shared credentials config file.

Change notification for anything caching the profile config file.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

ProfileListener = Callable[[Path], None]


class ProfileWatcher:
    """
    Notifies registered listeners that the config file changed on disk.

    Notification is best-effort: a failing listener is logged and skipped.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("ssoconfig.profile_watcher")
        self._listeners: List[ProfileListener] = []

    def add_listener(self, listener: ProfileListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ProfileListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listeners(self) -> List[ProfileListener]:
        return list(self._listeners)

    def force_refresh(self, path: Path) -> int:
        """
        Tell every listener to reload ``path``.

        Args:
            path: The config file that changed

        Returns:
            Number of listeners that were notified without error
        """
        notified = 0
        for listener in list(self._listeners):
            try:
                listener(path)
                notified += 1
            except Exception as e:
                self.logger.warning(f"Profile listener {listener!r} failed for {path}: {str(e)}")
        self.logger.debug(f"Notified {notified}/{len(self._listeners)} listeners of change to {path}")
        return notified
