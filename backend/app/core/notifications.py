import logging
from enum import Enum
from typing import Optional

from rq import Queue

from .config import settings

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    """Emails sent to users during lifecycle workflows."""

    ACTIVATION = "activation"
    DEACTIVATION = "deactivation"
    PASSWORD_RESET = "password_reset"


class Notifier:
    """Fire-and-forget notification hook.

    The base class only logs. ``dispatch`` never raises and returns nothing, so a
    failed notification cannot affect the response of the request that caused it.
    """

    def dispatch(self, kind: NotificationKind, user_id: str) -> None:
        logger.debug(f"Notification {kind.value} for {user_id} not sent: notifications disabled")


class QueueNotifier(Notifier):
    """Submit email jobs to an rq queue, processed by ``worker.py``."""

    def __init__(self, queue: Queue):
        self.queue = queue

    def dispatch(self, kind: NotificationKind, user_id: str) -> None:
        try:
            job = self.queue.enqueue(
                f"app.worker_tasks.send_{kind.value}_email",
                user_id,
                job_timeout="2m",
            )
            logger.info(f"Enqueued {kind.value} email job {job.id}")
        except Exception as e:
            logger.error(f"Failed to enqueue {kind.value} email for {user_id}: {e}")


_notifier: Optional[Notifier] = None


def get_notifier() -> Notifier:
    """Return the process-wide notifier selected by ``NOTIFICATIONS_ENABLED``."""
    global _notifier
    if _notifier is None:
        if settings.NOTIFICATIONS_ENABLED:
            from .queues import get_mail_queue

            _notifier = QueueNotifier(get_mail_queue())
        else:
            _notifier = Notifier()
    return _notifier
