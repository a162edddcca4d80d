"""
치료 계획 저장소

계획 행과 치료 유형별 상세 행(plan_detail)을 하나의 복합 엔티티로 다룬다.
모든 쓰기는 단일 트랜잭션이며, 실패 시 계획/상세 어느 쪽도 부분 저장되지 않는다.
"""
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from rehabcare.database import transaction, replace_set, read_scope
from rehabcare.exceptions import NotFoundError, ValidationError, ErrorCodes
from rehabcare.logging_config import log_database_operation
from rehabcare.models import Plan, PlanDetail, Patient, PlanStatus, TherapyType
from rehabcare.schemas.plan import TreatmentPlan

class TreatmentPlanStore:
    def __init__(self, db: Session):
        self.db = db

    def create_plan(self, plan: TreatmentPlan) -> int:
        """계획 + 상세 행 일괄 저장 (검증은 호출자 책임)"""
        with transaction(self.db):
            row = Plan(
                patient_id=plan.patient_id,
                start_date=plan.start_date,
                end_date=plan.end_date,
                status=plan.status.value,
                observations=plan.observations
            )
            self.db.add(row)
            self.db.flush()

            self.db.add_all(self._detail_rows(row.id, plan.required_weekly_hours))
            self.db.flush()
            plan_id = row.id

        plan.id = plan_id
        log_database_operation("create_plan", "plan", plan_id, {
            "patient_id": plan.patient_id,
            "therapy_types": len(plan.required_weekly_hours)
        })
        return plan_id

    def update_plan(self, plan: TreatmentPlan) -> None:
        """스칼라 필드 갱신 후 상세 행 전체 교체 (병합 아님)"""
        if plan.id is None:
            raise ValidationError("저장되지 않은 계획은 수정할 수 없습니다.")

        with transaction(self.db):
            row = self._get_row(plan.id, for_update=True)
            row.start_date = plan.start_date
            row.end_date = plan.end_date
            row.status = plan.status.value
            row.observations = plan.observations

            replace_set(
                self.db,
                PlanDetail,
                [PlanDetail.plan_id == row.id],
                self._detail_rows(row.id, plan.required_weekly_hours)
            )

        log_database_operation("update_plan", "plan", plan.id, {
            "therapy_types": [t.value for t in plan.required_weekly_hours]
        })

    def set_status(self, plan_id: int, status: PlanStatus) -> None:
        with transaction(self.db):
            row = self._get_row(plan_id, for_update=True)
            row.status = status.value

        log_database_operation("set_status", "plan", plan_id, {"status": status.value})

    def delete_plan(self, plan_id: int) -> None:
        """상세 행 삭제 후 계획 삭제 (원자적)"""
        with transaction(self.db):
            row = self._get_row(plan_id, for_update=True)
            self.db.query(PlanDetail).filter(
                PlanDetail.plan_id == plan_id
            ).delete(synchronize_session=False)
            self.db.delete(row)
            self.db.flush()

        log_database_operation("delete_plan", "plan", plan_id)

    def get_plan(self, plan_id: int) -> Optional[TreatmentPlan]:
        with read_scope(self.db):
            result = self._base_query().filter(Plan.id == plan_id).first()
            if not result:
                return None
            return self._to_plans([result])[0]

    def get_active_plan(self, patient_id: int) -> Optional[TreatmentPlan]:
        """활성 계획 조회

        활성 계획이 여러 개이면 시작일이 가장 늦은 계획이 선택된다.
        """
        with read_scope(self.db):
            result = self._base_query().filter(
                Plan.patient_id == patient_id,
                Plan.status == PlanStatus.ACTIVE.value
            ).order_by(
                Plan.start_date.desc(),
                Plan.id.desc()
            ).first()

            if not result:
                return None
            return self._to_plans([result])[0]

    def get_all_active_plans(self) -> List[TreatmentPlan]:
        with read_scope(self.db):
            results = self._base_query().filter(
                Plan.status == PlanStatus.ACTIVE.value
            ).order_by(
                Patient.name.asc(),
                Plan.start_date.desc()
            ).all()
            return self._to_plans(results)

    def get_plans_for_patient(self, patient_id: int) -> List[TreatmentPlan]:
        with read_scope(self.db):
            results = self._base_query().filter(
                Plan.patient_id == patient_id
            ).order_by(
                Plan.start_date.desc(),
                Plan.id.desc()
            ).all()
            return self._to_plans(results)

    def _base_query(self):
        return self.db.query(Plan, Patient.name).join(Patient, Patient.id == Plan.patient_id)

    def _get_row(self, plan_id: int, for_update: bool = False) -> Plan:
        query = self.db.query(Plan).filter(Plan.id == plan_id)
        if for_update:
            query = query.with_for_update()
        row = query.first()
        if row is None:
            raise NotFoundError(
                f"치료 계획 {plan_id}을(를) 찾을 수 없습니다.",
                error_code=ErrorCodes.PLAN_NOT_FOUND
            )
        return row

    def _load_hours(self, plan_ids: List[int]) -> Dict[int, Dict[TherapyType, int]]:
        hours: Dict[int, Dict[TherapyType, int]] = {plan_id: {} for plan_id in plan_ids}
        if not plan_ids:
            return hours

        details = self.db.query(PlanDetail).filter(
            PlanDetail.plan_id.in_(plan_ids)
        ).order_by(PlanDetail.id).all()

        for detail in details:
            hours[detail.plan_id][TherapyType(detail.therapy_type)] = detail.weekly_hours
        return hours

    def _to_plans(self, results) -> List[TreatmentPlan]:
        hours = self._load_hours([row.id for row, _ in results])
        return [
            TreatmentPlan(
                id=row.id,
                patient_id=row.patient_id,
                patient_name=patient_name,
                start_date=row.start_date,
                end_date=row.end_date,
                status=PlanStatus(row.status),
                observations=row.observations,
                required_weekly_hours=hours[row.id]
            )
            for row, patient_name in results
        ]

    @staticmethod
    def _detail_rows(plan_id: int, required_weekly_hours: Dict[TherapyType, int]) -> List[PlanDetail]:
        return [
            PlanDetail(plan_id=plan_id, therapy_type=therapy_type.value, weekly_hours=hours)
            for therapy_type, hours in required_weekly_hours.items()
        ]
