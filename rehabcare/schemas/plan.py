"""
치료 계획 스키마
"""
from pydantic import BaseModel, Field, validator
from typing import Dict, Optional
from datetime import date

from rehabcare.models.enums import TherapyType, PlanStatus

class TreatmentPlan(BaseModel):
    """환자의 치료 계획 값 객체

    required_weekly_hours 는 계획과 분리된 식별자가 없으며 항상 계획과 함께
    통째로 저장/교체된다.
    """
    id: Optional[int] = None
    patient_id: int = Field(..., gt=0)
    patient_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: PlanStatus = PlanStatus.ACTIVE
    observations: Optional[str] = ""
    required_weekly_hours: Dict[TherapyType, int] = Field(default_factory=dict)

    @validator('required_weekly_hours')
    def validate_weekly_hours(cls, v):
        for therapy_type, hours in v.items():
            if hours < 0:
                raise ValueError(f'{therapy_type.value} 주간 시간은 0 이상이어야 합니다.')
        return v

    def total_weekly_hours(self) -> int:
        return sum(self.required_weekly_hours.values())

    def is_valid(self) -> bool:
        """치료 유형이 하나 이상, 총 시간 > 0, 시작일 <= 종료일"""
        return (
            bool(self.required_weekly_hours)
            and self.total_weekly_hours() > 0
            and self.start_date is not None
            and self.end_date is not None
            and self.start_date <= self.end_date
        )

    def is_current(self, today: Optional[date] = None) -> bool:
        """활성 상태이며 오늘이 계획 기간 안에 있는지 (표시용)"""
        today = today or date.today()
        return (
            self.status == PlanStatus.ACTIVE
            and (self.start_date is None or self.start_date <= today)
            and (self.end_date is None or today <= self.end_date)
        )

class TreatmentPlanResponse(TreatmentPlan):
    total_hours: int = 0
    current: bool = False

    @classmethod
    def from_plan(cls, plan: TreatmentPlan) -> "TreatmentPlanResponse":
        return cls(
            **plan.model_dump(),
            total_hours=plan.total_weekly_hours(),
            current=plan.is_current()
        )
