"""
닫힌 열거형 정의 (경계에서 한 번만 검증)
"""
from enum import Enum

class TherapyType(str, Enum):
    FISIOTERAPIA = "Fisioterapia"
    TERAPIA_OCUPACIONAL = "Terapia Ocupacional"
    PSICOLOGIA = "Psicologia"
    FONOAUDIOLOGIA = "Fonoaudiologia"
    TERAPIA_RESPIRATORIA = "Terapia Respiratoria"
    HIDROTERAPIA = "Hidroterapia"
    ENFERMERIA = "Enfermeria"

class PlanStatus(str, Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"
    SUSPENDED = "Suspended"

class Role(str, Enum):
    ADMIN = "ADMIN"
    MEDICO = "MEDICO"
    TERAPEUTA = "TERAPEUTA"
    ENFERMERIA = "ENFERMERIA"

class AlertSeverity(str, Enum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"

class NotificationType(str, Enum):
    CRONOGRAMA_CAMBIO = "CRONOGRAMA_CAMBIO"
    PLAN_CREADO = "PLAN_CREADO"
    PLAN_ACTUALIZADO = "PLAN_ACTUALIZADO"
    GENERAL = "GENERAL"

class RecipientRole(str, Enum):
    ADMIN = "ADMIN"
    MEDICO = "MEDICO"
    TERAPEUTA = "TERAPEUTA"
    ENFERMERIA = "ENFERMERIA"
    TODOS = "TODOS"

# 허용되는 상태 전이 (자동 만료 없음)
PLAN_STATUS_TRANSITIONS = {
    PlanStatus.ACTIVE: {PlanStatus.COMPLETED, PlanStatus.SUSPENDED},
    PlanStatus.COMPLETED: set(),
    PlanStatus.SUSPENDED: set(),
}
