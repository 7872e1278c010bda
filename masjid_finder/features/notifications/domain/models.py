"""Domain models for user-facing notifications"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Notification type"""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class NotificationMessage:
    """A toast shown to the user"""

    message: str  # Text shown to the user
    notification_type: NotificationType = NotificationType.INFO
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def emoji(self) -> str:
        """Emoji for the notification type"""
        emoji_map = {
            NotificationType.INFO: "ℹ️",
            NotificationType.SUCCESS: "✅",
            NotificationType.WARNING: "⚠️",
            NotificationType.ERROR: "❌",
        }
        return emoji_map.get(self.notification_type, "📢")

    def render(self) -> str:
        """One-line text rendering"""
        return f"{self.emoji} {self.message}"
