"""
주간 준수 보고서 스키마 (저장되지 않는 파생 데이터)
"""
from pydantic import BaseModel, Field
from typing import Dict, List
from datetime import date

from rehabcare.models.enums import AlertSeverity, TherapyType
from .session import TherapySession

class Alert(BaseModel):
    severity: AlertSeverity
    therapy_type: TherapyType
    text: str

class WeeklyComplianceReport(BaseModel):
    patient_id: int
    week_start: date
    week_end: date
    required_hours_by_type: Dict[TherapyType, int] = Field(default_factory=dict)
    assigned_hours_by_type: Dict[TherapyType, int] = Field(default_factory=dict)
    sessions: List[TherapySession] = Field(default_factory=list)
    alerts: List[Alert] = Field(default_factory=list)
    committed: bool = False

    @property
    def has_critical_alerts(self) -> bool:
        return any(a.severity == AlertSeverity.CRITICAL for a in self.alerts)

    def alerts_of(self, severity: AlertSeverity) -> List[Alert]:
        return [a for a in self.alerts if a.severity == severity]
