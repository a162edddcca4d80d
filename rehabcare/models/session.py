from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from rehabcare.database import Base

# 치료 세션 모델 (주간 일정 교체로만 생성/삭제됨)
class ScheduledSession(Base):
    __tablename__ = "session"
    __table_args__ = (
        Index("idx_session_patient_start", "patient_id", "start_datetime"),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False)
    therapist_id = Column(String(80), nullable=False, index=True)
    therapy_type = Column(String(50), nullable=False)
    start_datetime = Column(DateTime, nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False)

    # 관계 설정
    patient = relationship("Patient")
