"""
알림 관련 라우터
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..response_models import success_response, list_response
from ..schemas.notification import NotificationResponse
from ..schemas.user import AuthSession
from ..services.auth import get_current_session
from ..services.notification import NotificationService

router = APIRouter()

@router.get("")
async def get_notifications(
    unread_only: bool = False,
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    auth: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """내 역할 대상 알림 목록"""
    notifications = NotificationService(db).get_notifications(
        auth.role, limit=limit, offset=offset, unread_only=unread_only
    )
    return list_response([NotificationResponse.model_validate(n) for n in notifications])

@router.get("/unread-count")
async def get_unread_count(
    auth: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """읽지 않은 알림 개수"""
    count = NotificationService(db).get_unread_count(auth.role)
    return success_response({"unread_count": count})

@router.post("/{notification_id}/read")
async def mark_notification_read(
    notification_id: int,
    auth: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """알림 읽음 처리"""
    notification = NotificationService(db).mark_as_read(notification_id, auth.role)
    return success_response(NotificationResponse.model_validate(notification))
