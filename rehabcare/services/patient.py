"""
환자 조회 서비스 (환자 기록 관리는 범위 밖, 존재 확인과 표시명만 제공)
"""
from typing import Optional
from sqlalchemy.orm import Session

from rehabcare.database import read_scope
from rehabcare.exceptions import PatientNotFound
from rehabcare.models import Patient

class PatientService:
    def __init__(self, db: Session):
        self.db = db

    def get_patient(self, patient_id: int) -> Optional[Patient]:
        with read_scope(self.db):
            return self.db.query(Patient).filter(Patient.id == patient_id).first()

    def require_patient(self, patient_id: int) -> Patient:
        patient = self.get_patient(patient_id)
        if patient is None:
            raise PatientNotFound(patient_id)
        return patient
