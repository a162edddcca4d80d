"""
주간 치료 일정 편성 및 준수 판정 엔진

환자의 활성 치료 계획(치료 유형별 주간 필요 시간)과 제안된 한 주 세션 목록을
비교해 유형별 준수 여부를 분류하고, 치명적(CRITICAL) 경고가 없으면 해당 주의
일정을 원자적으로 교체한다.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from datetime import date, timedelta
from sqlalchemy.orm import Session

from rehabcare.database import transaction
from rehabcare.exceptions import OutOfWeekRange, PlanNotFound, ValidationError
from rehabcare.logging_config import get_logger, log_schedule_evaluation
from rehabcare.models import Patient, AlertSeverity, TherapyType
from rehabcare.schemas.plan import TreatmentPlan
from rehabcare.schemas.schedule import Alert, WeeklyComplianceReport
from rehabcare.schemas.session import ProposedSession, TherapySession
from .notification import NotificationService
from .plan_store import TreatmentPlanStore
from .session_store import SessionStore

logger = get_logger("scheduling")

# 배정 시간 환산 단위 (분 -> 정시간, 내림)
MINUTES_PER_HOUR = 60

def week_start_of(day: date) -> date:
    """해당 날짜가 속한 주의 월요일"""
    return day - timedelta(days=day.weekday())

def week_bounds(day: date) -> Tuple[date, date]:
    start = week_start_of(day)
    return start, start + timedelta(days=6)

def compute_assigned_hours(sessions: Iterable[ProposedSession]) -> Dict[TherapyType, int]:
    """유형별 분 합계를 정시간으로 내림 (150분 -> 2시간)"""
    minutes: Dict[TherapyType, int] = defaultdict(int)
    for session in sessions:
        minutes[session.therapy_type] += session.duration_minutes
    return {therapy_type: total // MINUTES_PER_HOUR for therapy_type, total in minutes.items()}

def classify_compliance(
    required: Dict[TherapyType, int],
    assigned: Dict[TherapyType, int]
) -> List[Alert]:
    """계획에 있는 유형만 판정. 계획에 없는 유형은 경고를 만들지 않는다."""
    alerts = []

    for therapy_type, required_hours in required.items():
        assigned_hours = assigned.get(therapy_type, 0)
        label = therapy_type.value

        if assigned_hours == required_hours:
            continue

        if assigned_hours < required_hours:
            if assigned_hours == 0:
                alerts.append(Alert(
                    severity=AlertSeverity.CRITICAL,
                    therapy_type=therapy_type,
                    text=f"{label} 세션이 배정되지 않았습니다 (필요: {required_hours}시간)"
                ))
            else:
                alerts.append(Alert(
                    severity=AlertSeverity.WARNING,
                    therapy_type=therapy_type,
                    text=f"{label} 배정 부족: {assigned_hours}/{required_hours}시간"
                ))
        else:
            alerts.append(Alert(
                severity=AlertSeverity.INFO,
                therapy_type=therapy_type,
                text=f"{label} {assigned_hours}시간 배정, 필요 시간보다 {assigned_hours - required_hours}시간 초과"
            ))

    return alerts

class WeeklySchedulingEngine:
    def __init__(
        self,
        db: Session,
        plan_store: Optional[TreatmentPlanStore] = None,
        session_store: Optional[SessionStore] = None,
        dispatcher: Optional[NotificationService] = None
    ):
        self.db = db
        self.plan_store = plan_store or TreatmentPlanStore(db)
        self.session_store = session_store or SessionStore(db)
        self.dispatcher = dispatcher or NotificationService(db)

    def get_sessions_for_week(self, patient_id: int, week_start: date) -> List[TherapySession]:
        start, end = week_bounds(week_start)
        return self.session_store.get_sessions_for_patient_in_range(patient_id, start, end)

    def plan_week(
        self,
        patient_id: int,
        week_start: date,
        proposed_sessions: Sequence[ProposedSession]
    ) -> WeeklyComplianceReport:
        """주간 일정 평가 및 (가능하면) 교체

        - 활성 계획 없음 -> PlanNotFound (보고서 없음)
        - 주간 밖 세션이 하나라도 있으면 OutOfWeekRange (전체 거부)
        - CRITICAL 경고가 없을 때만 해당 주 세션 전체를 원자적으로 교체
        """
        start, end = week_bounds(week_start)
        proposed = list(proposed_sessions)

        # 조회 -> 검증 -> 교체 전체를 하나의 트랜잭션으로 묶고 환자 행을 잠가
        # 같은 환자에 대한 동시 편성을 직렬화한다
        with transaction(self.db):
            self._lock_patient(patient_id)

            plan = self.plan_store.get_active_plan(patient_id)
            if plan is None:
                raise PlanNotFound(patient_id)

            self._validate_sessions(patient_id, proposed, start, end)

            assigned = compute_assigned_hours(proposed)
            alerts = classify_compliance(plan.required_weekly_hours, assigned)

            report = WeeklyComplianceReport(
                patient_id=patient_id,
                week_start=start,
                week_end=end,
                required_hours_by_type=dict(plan.required_weekly_hours),
                assigned_hours_by_type=assigned,
                alerts=alerts
            )

            if report.has_critical_alerts:
                report.sessions = [self._as_session(patient_id, s) for s in proposed]
            else:
                report.sessions = self.session_store.replace_sessions_for_patient_in_range(
                    patient_id, start, end, proposed
                )
                report.committed = True

        therapist_ids = {s.therapist_id for s in report.sessions}
        log_schedule_evaluation(
            patient_id,
            start,
            {severity.value: len(report.alerts_of(severity)) for severity in AlertSeverity},
            report.committed,
            therapist_ids if report.committed else ()
        )

        if report.committed:
            self._notify_schedule_changed(plan, therapist_ids)

        return report

    def _lock_patient(self, patient_id: int) -> None:
        self.db.query(Patient).filter(Patient.id == patient_id).with_for_update().first()

    @staticmethod
    def _validate_sessions(patient_id: int, sessions: List[ProposedSession], start: date, end: date) -> None:
        for session in sessions:
            # 환자가 지정된 세션은 같은 환자의 것이어야 한다
            if isinstance(session, TherapySession) and session.patient_id != patient_id:
                raise ValidationError(f"다른 환자({session.patient_id})의 세션은 이 주간 일정에 포함할 수 없습니다.")

            session_date = session.start_datetime.date()
            if session_date < start or session_date > end:
                raise OutOfWeekRange(session_date, start)

    @staticmethod
    def _as_session(patient_id: int, session: ProposedSession) -> TherapySession:
        return TherapySession(
            patient_id=patient_id,
            therapist_id=session.therapist_id,
            therapy_type=session.therapy_type,
            start_datetime=session.start_datetime,
            duration_minutes=session.duration_minutes
        )

    def _notify_schedule_changed(self, plan: TreatmentPlan, therapist_ids: set) -> None:
        # 커밋 이후의 알림 실패는 일정 교체를 되돌리지 않는다
        try:
            self.dispatcher.notify_schedule_changed(plan.patient_id, plan.patient_name, therapist_ids)
        except Exception as e:
            logger.error(
                f"일정 변경 알림 실패: {e}",
                extra={'extra_data': {'patient_id': plan.patient_id, 'error_type': type(e).__name__}}
            )
