"""
치료 세션 저장소

개별 호출은 각자 트랜잭션으로 실행되지만, 바깥 transaction() 범위 안에서
호출되면 그 트랜잭션에 합류한다. 여러 행에 걸친 원자성은 호출자가 책임진다.
"""
from typing import List
from datetime import date, datetime, time, timedelta
from sqlalchemy.orm import Session

from rehabcare.database import transaction, replace_set, read_scope
from rehabcare.exceptions import NotFoundError, ErrorCodes
from rehabcare.logging_config import log_database_operation
from rehabcare.models import ScheduledSession
from rehabcare.schemas.session import ProposedSession, TherapySession

def _range_criteria(date_from: date, date_to: date) -> list:
    """[date_from, date_to] 날짜 구간 (양 끝 포함)"""
    return [
        ScheduledSession.start_datetime >= datetime.combine(date_from, time.min),
        ScheduledSession.start_datetime < datetime.combine(date_to + timedelta(days=1), time.min),
    ]

class SessionStore:
    def __init__(self, db: Session):
        self.db = db

    def create_session(self, session: TherapySession) -> TherapySession:
        with transaction(self.db):
            row = self._to_row(session.patient_id, session)
            self.db.add(row)
            self.db.flush()
            created = TherapySession.model_validate(row)

        log_database_operation("create_session", "session", created.id)
        return created

    def update_session(self, session: TherapySession) -> TherapySession:
        with transaction(self.db):
            row = self.db.query(ScheduledSession).filter(
                ScheduledSession.id == session.id
            ).first()
            if row is None:
                raise NotFoundError(
                    f"세션 {session.id}을(를) 찾을 수 없습니다.",
                    error_code=ErrorCodes.SESSION_NOT_FOUND
                )

            row.therapist_id = session.therapist_id
            row.therapy_type = session.therapy_type.value
            row.start_datetime = session.start_datetime
            row.duration_minutes = session.duration_minutes
            self.db.flush()
            updated = TherapySession.model_validate(row)

        log_database_operation("update_session", "session", updated.id)
        return updated

    def get_sessions_for_patient_in_range(self, patient_id: int, date_from: date, date_to: date) -> List[TherapySession]:
        return self._find(ScheduledSession.patient_id == patient_id, *_range_criteria(date_from, date_to))

    def get_sessions_in_range(self, date_from: date, date_to: date) -> List[TherapySession]:
        """전체 환자 대상 구간 조회 (보고서용)"""
        return self._find(*_range_criteria(date_from, date_to))

    def get_sessions_for_therapist_on_date(self, therapist_id: str, day: date) -> List[TherapySession]:
        """치료사 일일 일정 조회"""
        return self._find(ScheduledSession.therapist_id == therapist_id, *_range_criteria(day, day))

    def delete_sessions_for_patient_in_range(self, patient_id: int, date_from: date, date_to: date) -> int:
        with transaction(self.db):
            deleted = self.db.query(ScheduledSession).filter(
                ScheduledSession.patient_id == patient_id,
                *_range_criteria(date_from, date_to)
            ).delete(synchronize_session=False)

        log_database_operation("delete_sessions", "session", details={
            "patient_id": patient_id,
            "from": date_from.isoformat(),
            "to": date_to.isoformat(),
            "deleted": deleted
        })
        return deleted

    def replace_sessions_for_patient_in_range(
        self,
        patient_id: int,
        date_from: date,
        date_to: date,
        sessions: List[ProposedSession]
    ) -> List[TherapySession]:
        """구간 안의 환자 세션 전체를 새 세션 집합으로 교체"""
        with transaction(self.db):
            rows = replace_set(
                self.db,
                ScheduledSession,
                [ScheduledSession.patient_id == patient_id, *_range_criteria(date_from, date_to)],
                [self._to_row(patient_id, s) for s in sessions]
            )
            replaced = [TherapySession.model_validate(row) for row in rows]

        log_database_operation("replace_sessions", "session", details={
            "patient_id": patient_id,
            "from": date_from.isoformat(),
            "to": date_to.isoformat(),
            "inserted": len(replaced)
        })
        return replaced

    @staticmethod
    def _to_row(patient_id: int, session: ProposedSession) -> ScheduledSession:
        return ScheduledSession(
            patient_id=patient_id,
            therapist_id=session.therapist_id,
            therapy_type=session.therapy_type.value,
            start_datetime=session.start_datetime,
            duration_minutes=session.duration_minutes
        )

    def _find(self, *criteria) -> List[TherapySession]:
        with read_scope(self.db):
            rows = self.db.query(ScheduledSession).filter(
                *criteria
            ).order_by(ScheduledSession.start_datetime, ScheduledSession.id).all()
            return [TherapySession.model_validate(row) for row in rows]
