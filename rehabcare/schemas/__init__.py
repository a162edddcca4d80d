"""
스키마 패키지 __init__.py
"""
from .plan import TreatmentPlan, TreatmentPlanResponse
from .session import ProposedSession, TherapySession
from .schedule import Alert, WeeklyComplianceReport
from .user import UserLogin, AuthSession, LoginResponse
from .notification import NotificationResponse

__all__ = [
    # Plan schemas
    "TreatmentPlan", "TreatmentPlanResponse",

    # Session schemas
    "ProposedSession", "TherapySession",
    "Alert", "WeeklyComplianceReport",

    # User schemas
    "UserLogin", "AuthSession", "LoginResponse",

    # Notification schemas
    "NotificationResponse",
]
