from .unit_of_work import UnitOfWork
from .notification_service import NotificationService, InvariantAlert, AlertKind

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "InvariantAlert",
    "AlertKind",
]
