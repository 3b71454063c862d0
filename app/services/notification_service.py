"""
Workflow notifications

The approval service hands every outcome to a Notifier after its transaction
has committed. Delivery is fire-and-forget: a failing sender is logged and
never undoes the state transition that triggered it.
"""
import enum
import logging
from typing import Any, Dict, Optional

from app.core.config import settings
from app.utils.json_serializer import sanitize_for_json

logger = logging.getLogger(__name__)


class NotificationKind(str, enum.Enum):
    SUBMISSION_CONFIRMED = "submission_confirmed"
    APPROVAL_NEEDED = "approval_needed"
    PARTIALLY_APPROVED = "partially_approved"
    FULLY_APPROVED = "fully_approved"
    REJECTED = "rejected"
    REVOKE_REQUESTED = "revoke_requested"


class LoggingNotificationSender:
    """Default transport: writes notifications to the application log"""

    def send(self, kind: NotificationKind, recipient_id: int, payload: Dict[str, Any]) -> None:
        logger.info("notification: kind=%s recipient_id=%s payload=%s", kind.value, recipient_id, payload)


class Notifier:
    def __init__(self, sender=None, enabled: Optional[bool] = None):
        self.sender = sender or LoggingNotificationSender()
        self.enabled = settings.NOTIFICATIONS_ENABLED if enabled is None else enabled

    def notify(self, kind: NotificationKind, recipient_id: int, payload: Dict[str, Any]) -> None:
        if not self.enabled:
            logger.debug("notifications disabled, dropping kind=%s recipient_id=%s", kind.value, recipient_id)
            return
        try:
            self.sender.send(kind, recipient_id, sanitize_for_json(payload))
        except Exception:
            logger.exception(
                "notification delivery failed: kind=%s recipient_id=%s", kind.value, recipient_id
            )


_default_sender = LoggingNotificationSender()


def set_notification_sender(sender) -> None:
    """Install the transport used by get_notifier (e.g. an SMTP or queue sender)"""
    global _default_sender
    _default_sender = sender


def get_notifier() -> Notifier:
    """FastAPI dependency returning a Notifier bound to the configured sender"""
    return Notifier(_default_sender)
