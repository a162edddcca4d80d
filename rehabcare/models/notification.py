from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from rehabcare.database import Base

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"))
    type = Column(String(30), nullable=False, default="GENERAL", index=True)  # CRONOGRAMA_CAMBIO, PLAN_CREADO, ...
    recipient_role = Column(String(20), nullable=False, default="TODOS")  # ADMIN, MEDICO, TERAPEUTA, ENFERMERIA, TODOS
    message = Column(Text, nullable=False)
    data = Column(JSON)  # 추가 데이터
    is_read = Column(Boolean, default=False, index=True)
    read_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now(), index=True)

    # 관계 설정
    patient = relationship("Patient")
