"""
치료 계획 서비스 로직 (생성/수정 경로: 환자 확인 -> 유효성 검사 -> 저장 -> 알림)
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from rehabcare.exceptions import ValidationError, NotFoundError, ErrorCodes
from rehabcare.logging_config import get_logger
from rehabcare.models import PlanStatus, PLAN_STATUS_TRANSITIONS
from rehabcare.schemas.plan import TreatmentPlan
from .notification import NotificationService
from .patient import PatientService
from .plan_store import TreatmentPlanStore

logger = get_logger("treatment_plan")

class TreatmentPlanService:
    def __init__(
        self,
        db: Session,
        store: Optional[TreatmentPlanStore] = None,
        patients: Optional[PatientService] = None,
        dispatcher: Optional[NotificationService] = None
    ):
        self.db = db
        self.store = store or TreatmentPlanStore(db)
        self.patients = patients or PatientService(db)
        self.dispatcher = dispatcher or NotificationService(db)

    def create_plan(self, plan: TreatmentPlan) -> int:
        """새 치료 계획 생성 (항상 Active 로 시작)"""
        patient = self.patients.require_patient(plan.patient_id)
        plan.patient_name = patient.name
        plan.status = PlanStatus.ACTIVE

        if not plan.is_valid():
            raise ValidationError("치료 계획이 유효하지 않습니다. 치료 유형별 시간과 기간을 확인해주세요.")

        plan_id = self.store.create_plan(plan)

        self._notify(
            self.dispatcher.notify_plan_created,
            plan.patient_id, plan.patient_name, plan.total_weekly_hours()
        )
        return plan_id

    def update_plan(self, plan: TreatmentPlan) -> TreatmentPlan:
        """치료 계획 수정 (필요 시간 맵은 전체 교체)"""
        current = self.get_plan(plan.id)
        plan.patient_id = current.patient_id
        plan.patient_name = current.patient_name
        # 상태는 change_status 로만 바뀐다
        plan.status = current.status

        if not plan.is_valid():
            raise ValidationError("치료 계획이 유효하지 않습니다. 치료 유형별 시간과 기간을 확인해주세요.")

        self.store.update_plan(plan)

        self._notify(self.dispatcher.notify_plan_updated, plan.patient_id, plan.patient_name)
        return self.get_plan(plan.id)

    def change_status(self, plan_id: int, status: PlanStatus) -> TreatmentPlan:
        """상태 전이: Active -> Completed / Suspended 만 허용"""
        plan = self.get_plan(plan_id)

        if status not in PLAN_STATUS_TRANSITIONS[plan.status]:
            raise ValidationError(
                f"치료 계획 상태를 {plan.status.value}에서 {status.value}(으)로 변경할 수 없습니다.",
                error_code=ErrorCodes.INVALID_STATUS_TRANSITION
            )

        self.store.set_status(plan_id, status)
        logger.info(
            f"치료 계획 상태 변경: {plan_id}",
            extra={'extra_data': {'from': plan.status.value, 'to': status.value}}
        )
        return self.get_plan(plan_id)

    def delete_plan(self, plan_id: int) -> None:
        self.store.delete_plan(plan_id)

    def get_plan(self, plan_id: Optional[int]) -> TreatmentPlan:
        plan = self.store.get_plan(plan_id) if plan_id is not None else None
        if plan is None:
            raise NotFoundError(
                f"치료 계획 {plan_id}을(를) 찾을 수 없습니다.",
                error_code=ErrorCodes.PLAN_NOT_FOUND
            )
        return plan

    def get_active_plan(self, patient_id: int) -> Optional[TreatmentPlan]:
        return self.store.get_active_plan(patient_id)

    def get_all_active_plans(self) -> List[TreatmentPlan]:
        return self.store.get_all_active_plans()

    def get_plans_for_patient(self, patient_id: int) -> List[TreatmentPlan]:
        self.patients.require_patient(patient_id)
        return self.store.get_plans_for_patient(patient_id)

    @staticmethod
    def _notify(send, *args) -> None:
        # 알림 실패는 이미 저장된 계획에 영향을 주지 않는다
        try:
            send(*args)
        except Exception as e:
            logger.error(f"치료 계획 알림 실패: {e}", extra={'extra_data': {'error_type': type(e).__name__}})
