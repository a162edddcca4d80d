"""
치료 세션 스키마
"""
from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime

from rehabcare.models.enums import TherapyType

class ProposedSession(BaseModel):
    therapist_id: str = Field(..., min_length=1, max_length=80)
    therapy_type: TherapyType
    start_datetime: datetime
    duration_minutes: int = Field(..., gt=0)

    @validator('therapist_id')
    def validate_therapist_id(cls, v):
        if not v.strip():
            raise ValueError('치료사 ID는 빈 값일 수 없습니다')
        return v.strip()

class TherapySession(ProposedSession):
    id: Optional[int] = None
    patient_id: int

    class Config:
        from_attributes = True
