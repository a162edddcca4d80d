"""
입력 검증 및 밸리데이션
"""
from pydantic import BaseModel, validator, Field
from typing import Optional, List, Dict
from datetime import date

from rehabcare.models.enums import TherapyType, PlanStatus
from rehabcare.schemas.plan import TreatmentPlan
from rehabcare.schemas.session import ProposedSession

class PlanCreateRequest(BaseModel):
    """치료 계획 생성 요청 검증"""
    patient_id: int = Field(..., gt=0, description="환자 ID")
    start_date: date = Field(..., description="시작 날짜")
    end_date: date = Field(..., description="종료 날짜")
    observations: Optional[str] = Field("", max_length=2000, description="관찰 메모")
    required_weekly_hours: Dict[TherapyType, int] = Field(..., min_length=1, description="치료 유형별 주간 필요 시간")

    @validator('end_date')
    def validate_date_range(cls, v, values):
        if 'start_date' in values and v < values['start_date']:
            raise ValueError('종료 날짜는 시작 날짜보다 빠를 수 없습니다')
        return v

    @validator('required_weekly_hours')
    def validate_weekly_hours(cls, v):
        if any(hours < 0 for hours in v.values()):
            raise ValueError('주간 시간은 0 이상의 정수여야 합니다')
        if sum(v.values()) <= 0:
            raise ValueError('총 주간 시간은 1시간 이상이어야 합니다')
        return v

    def to_plan(self) -> TreatmentPlan:
        return TreatmentPlan(**self.model_dump())

class PlanUpdateRequest(BaseModel):
    """치료 계획 수정 요청 검증 (필요 시간 맵은 전체 교체)"""
    start_date: date = Field(..., description="시작 날짜")
    end_date: date = Field(..., description="종료 날짜")
    observations: Optional[str] = Field("", max_length=2000, description="관찰 메모")
    required_weekly_hours: Dict[TherapyType, int] = Field(..., min_length=1, description="치료 유형별 주간 필요 시간")

    @validator('end_date')
    def validate_date_range(cls, v, values):
        if 'start_date' in values and v < values['start_date']:
            raise ValueError('종료 날짜는 시작 날짜보다 빠를 수 없습니다')
        return v

    @validator('required_weekly_hours')
    def validate_weekly_hours(cls, v):
        if any(hours < 0 for hours in v.values()):
            raise ValueError('주간 시간은 0 이상의 정수여야 합니다')
        return v

    def to_plan(self, plan_id: int, patient_id: int) -> TreatmentPlan:
        return TreatmentPlan(id=plan_id, patient_id=patient_id, **self.model_dump())

class PlanStatusRequest(BaseModel):
    """치료 계획 상태 변경 요청"""
    status: PlanStatus = Field(..., description="새 상태 (Completed, Suspended)")

class WeekPlanRequest(BaseModel):
    """주간 일정 편성 요청 검증"""
    sessions: List[ProposedSession] = Field(default_factory=list, max_length=200, description="제안 세션 목록")
