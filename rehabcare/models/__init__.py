from .user import User
from .patient import Patient
from .plan import Plan, PlanDetail
from .session import ScheduledSession
from .notification import Notification
from .enums import (
    TherapyType, PlanStatus, Role, AlertSeverity,
    NotificationType, RecipientRole, PLAN_STATUS_TRANSITIONS
)

__all__ = [
    "User", "Patient",
    "Plan", "PlanDetail",
    "ScheduledSession", "Notification",
    "TherapyType", "PlanStatus", "Role", "AlertSeverity",
    "NotificationType", "RecipientRole", "PLAN_STATUS_TRANSITIONS"
]
