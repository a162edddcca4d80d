from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Text, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from rehabcare.database import Base

# 치료 계획 관련 모델
class Plan(Base):
    __tablename__ = "plan"
    __table_args__ = (
        Index("idx_plan_patient_status", "patient_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="Active")  # Active, Completed, Suspended
    observations = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # 관계 설정
    patient = relationship("Patient")
    details = relationship("PlanDetail", order_by="PlanDetail.id", passive_deletes=True)

class PlanDetail(Base):
    """치료 유형별 주간 필요 시간 (계획과 함께만 저장/교체됨)"""
    __tablename__ = "plan_detail"
    __table_args__ = (
        UniqueConstraint("plan_id", "therapy_type", name="unique_plan_tipo"),
    )

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("plan.id", ondelete="CASCADE"), nullable=False, index=True)
    therapy_type = Column(String(50), nullable=False)
    weekly_hours = Column(Integer, nullable=False, default=0)
