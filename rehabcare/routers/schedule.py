"""
주간 치료 일정 관련 라우터
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from ..database import get_db
from ..exceptions import ValidationError
from ..logging_config import log_user_action
from ..response_models import success_response, list_response
from ..schemas.user import AuthSession
from ..services.auth import get_current_session, get_authorization_gate, AuthorizationGate
from ..services.scheduling import WeeklySchedulingEngine
from ..services.session_store import SessionStore
from ..validators import WeekPlanRequest

router = APIRouter()

@router.get("/patients/{patient_id}/weeks/{week_start}/sessions")
async def get_week_sessions(
    patient_id: int,
    week_start: date,
    auth: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """환자의 주간 세션 조회 (날짜는 해당 주 월요일로 정규화)"""
    sessions = WeeklySchedulingEngine(db).get_sessions_for_week(patient_id, week_start)
    return list_response(sessions)

@router.post("/patients/{patient_id}/weeks/{week_start}")
async def plan_week(
    patient_id: int,
    week_start: date,
    request: WeekPlanRequest,
    auth: AuthSession = Depends(get_current_session),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    db: Session = Depends(get_db)
):
    """주간 일정 편성

    CRITICAL 경고가 있으면 저장하지 않고 committed=false 보고서를 반환한다.
    """
    gate.require_scheduler(auth, patient_id)

    report = WeeklySchedulingEngine(db).plan_week(patient_id, week_start, request.sessions)

    log_user_action(auth.user_id, "plan_week", {
        "patient_id": patient_id,
        "week_start": report.week_start.isoformat(),
        "committed": report.committed
    })
    message = "주간 일정이 저장되었습니다." if report.committed else "필수 치료가 누락되어 저장되지 않았습니다."
    return success_response(report, message)

@router.get("/therapists/{therapist_id}/sessions")
async def get_therapist_agenda(
    therapist_id: str,
    day: Optional[date] = Query(None, description="조회 날짜 (기본: 오늘)"),
    auth: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """치료사 일일 일정 조회"""
    sessions = SessionStore(db).get_sessions_for_therapist_on_date(therapist_id, day or date.today())
    return list_response(sessions)

@router.get("/sessions")
async def get_sessions_in_range(
    date_from: date = Query(..., description="시작 날짜"),
    date_to: date = Query(..., description="종료 날짜"),
    auth: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """기간 내 전체 세션 조회 (보고서용)"""
    if date_to < date_from:
        raise ValidationError("종료 날짜는 시작 날짜보다 빠를 수 없습니다")

    sessions = SessionStore(db).get_sessions_in_range(date_from, date_to)
    return list_response(sessions)
