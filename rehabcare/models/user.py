from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.sql import func
from rehabcare.database import Base

# 사용자 관련 모델
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(40), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # ADMIN, MEDICO, TERAPEUTA, ENFERMERIA
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
