"""
치료 계획 관련 라우터
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..logging_config import log_user_action
from ..response_models import success_response, list_response
from ..schemas.plan import TreatmentPlanResponse
from ..schemas.user import AuthSession
from ..services.auth import get_current_session, get_authorization_gate, AuthorizationGate
from ..services.treatment_plan import TreatmentPlanService
from ..validators import PlanCreateRequest, PlanUpdateRequest, PlanStatusRequest

router = APIRouter()

@router.post("/plans", status_code=201)
async def create_plan(
    request: PlanCreateRequest,
    auth: AuthSession = Depends(get_current_session),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    db: Session = Depends(get_db)
):
    """치료 계획 생성 (의사 전용)"""
    gate.require_scheduler(auth, request.patient_id)

    service = TreatmentPlanService(db)
    plan_id = service.create_plan(request.to_plan())
    plan = service.get_plan(plan_id)

    log_user_action(auth.user_id, "create_plan", {"plan_id": plan_id, "patient_id": plan.patient_id})
    return success_response(TreatmentPlanResponse.from_plan(plan), "치료 계획이 생성되었습니다.")

@router.get("/plans/active")
async def get_all_active_plans(
    auth: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """전체 활성 치료 계획 조회"""
    plans = TreatmentPlanService(db).get_all_active_plans()
    return list_response([TreatmentPlanResponse.from_plan(p) for p in plans])

@router.get("/plans/{plan_id}")
async def get_plan(
    plan_id: int,
    auth: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """치료 계획 상세 조회"""
    plan = TreatmentPlanService(db).get_plan(plan_id)
    return success_response(TreatmentPlanResponse.from_plan(plan))

@router.put("/plans/{plan_id}")
async def update_plan(
    plan_id: int,
    request: PlanUpdateRequest,
    auth: AuthSession = Depends(get_current_session),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    db: Session = Depends(get_db)
):
    """치료 계획 수정 (의사 전용, 필요 시간 맵 전체 교체)"""
    service = TreatmentPlanService(db)
    current = service.get_plan(plan_id)
    gate.require_scheduler(auth, current.patient_id)

    plan = service.update_plan(request.to_plan(plan_id, current.patient_id))

    log_user_action(auth.user_id, "update_plan", {"plan_id": plan_id})
    return success_response(TreatmentPlanResponse.from_plan(plan), "치료 계획이 수정되었습니다.")

@router.patch("/plans/{plan_id}/status")
async def change_plan_status(
    plan_id: int,
    request: PlanStatusRequest,
    auth: AuthSession = Depends(get_current_session),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    db: Session = Depends(get_db)
):
    """치료 계획 상태 변경 (Active -> Completed / Suspended)"""
    service = TreatmentPlanService(db)
    current = service.get_plan(plan_id)
    gate.require_scheduler(auth, current.patient_id)

    plan = service.change_status(plan_id, request.status)

    log_user_action(auth.user_id, "change_plan_status", {"plan_id": plan_id, "status": request.status.value})
    return success_response(TreatmentPlanResponse.from_plan(plan))

@router.delete("/plans/{plan_id}")
async def delete_plan(
    plan_id: int,
    auth: AuthSession = Depends(get_current_session),
    gate: AuthorizationGate = Depends(get_authorization_gate),
    db: Session = Depends(get_db)
):
    """치료 계획 삭제 (상세 포함)"""
    service = TreatmentPlanService(db)
    current = service.get_plan(plan_id)
    gate.require_scheduler(auth, current.patient_id)

    service.delete_plan(plan_id)

    log_user_action(auth.user_id, "delete_plan", {"plan_id": plan_id})
    return success_response(message="치료 계획이 삭제되었습니다.")

@router.get("/patients/{patient_id}/plans")
async def get_patient_plans(
    patient_id: int,
    auth: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """환자의 전체 치료 계획 조회"""
    plans = TreatmentPlanService(db).get_plans_for_patient(patient_id)
    return list_response([TreatmentPlanResponse.from_plan(p) for p in plans])

@router.get("/patients/{patient_id}/plans/active")
async def get_patient_active_plan(
    patient_id: int,
    auth: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """환자의 활성 치료 계획 조회 (없으면 data=null)"""
    plan = TreatmentPlanService(db).get_active_plan(patient_id)
    return success_response(TreatmentPlanResponse.from_plan(plan) if plan else None)
