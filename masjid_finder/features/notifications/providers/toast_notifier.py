"""Toast notification provider"""

import logging
from collections import deque
from typing import Callable, Optional

from ..domain.models import NotificationMessage, NotificationType
from ....shared.exceptions.errors import NotificationError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

_LOG_LEVELS = {
    NotificationType.INFO: logging.INFO,
    NotificationType.SUCCESS: logging.INFO,
    NotificationType.WARNING: logging.WARNING,
    NotificationType.ERROR: logging.ERROR,
}


class ToastNotifier:
    """
    Collects short-lived user notifications

    Every toast is logged and kept in a bounded history; an optional
    ``display`` callback renders it (the CLI prints it).
    """

    def __init__(
        self,
        display: Optional[Callable[[NotificationMessage], None]] = None,
        history_size: int = 20,
    ) -> None:
        """
        Args:
            display: Called with every toast
            history_size: Number of toasts kept for later inspection
        """
        self.display = display
        self.history: deque[NotificationMessage] = deque(maxlen=history_size)

    def show(
        self,
        message: str,
        notification_type: NotificationType = NotificationType.INFO,
    ) -> NotificationMessage:
        """
        Show a toast

        Args:
            message: Text shown to the user
            notification_type: Toast type

        Returns:
            NotificationMessage: The toast that was shown

        Raises:
            NotificationError: The display callback failed
        """
        toast = NotificationMessage(message=message, notification_type=notification_type)
        self.history.append(toast)

        logger.log(
            _LOG_LEVELS.get(notification_type, logging.INFO),
            f"Toast ({notification_type.value}): {message}",
        )

        if self.display is not None:
            try:
                self.display(toast)
            except Exception as e:
                raise NotificationError(f"Failed to display toast: {e}") from e

        return toast

    def warning(self, message: str) -> NotificationMessage:
        return self.show(message, NotificationType.WARNING)

    def error(self, message: str) -> NotificationMessage:
        return self.show(message, NotificationType.ERROR)

    @property
    def latest(self) -> Optional[NotificationMessage]:
        return self.history[-1] if self.history else None
