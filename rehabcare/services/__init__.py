"""
서비스 패키지
"""
from .plan_store import TreatmentPlanStore
from .session_store import SessionStore
from .scheduling import WeeklySchedulingEngine, week_start_of, week_bounds, compute_assigned_hours, classify_compliance
from .treatment_plan import TreatmentPlanService
from .notification import NotificationService
from .patient import PatientService

__all__ = [
    "TreatmentPlanStore", "SessionStore",
    "WeeklySchedulingEngine", "week_start_of", "week_bounds",
    "compute_assigned_hours", "classify_compliance",
    "TreatmentPlanService", "NotificationService", "PatientService",
]
