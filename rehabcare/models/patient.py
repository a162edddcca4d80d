from sqlalchemy import Column, Integer, String, DateTime, Date, Text
from sqlalchemy.sql import func
from rehabcare.database import Base

# 환자 관련 모델
class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(80), nullable=False)
    document = Column(String(20), unique=True, index=True, nullable=False)
    birth_date = Column(Date)
    diagnosis = Column(Text, nullable=False)
    room = Column(String(10))
    status = Column(String(20), default="Activo", index=True)  # Activo, Alta, Baja
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
