"""
알림 서비스

일정/계획 변경 이벤트를 역할 대상 알림 행으로 남긴다. 실제 푸시/메일 전송은
이 서비스의 범위가 아니다.
"""
from typing import Any, Dict, Iterable, List, Optional
from datetime import datetime
from sqlalchemy import or_
from sqlalchemy.orm import Session

from rehabcare.database import transaction, read_scope
from rehabcare.exceptions import NotFoundError, AuthorizationError, ErrorCodes
from rehabcare.logging_config import get_logger
from rehabcare.models import Notification, NotificationType, RecipientRole, Role

logger = get_logger("notification")

class NotificationService:
    def __init__(self, db: Session):
        self.db = db

    def send_notification(
        self,
        type: NotificationType,
        recipient_role: RecipientRole,
        message: str,
        patient_id: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None
    ) -> Notification:
        """알림 전송"""

        with transaction(self.db):
            notification = Notification(
                patient_id=patient_id,
                type=type.value,
                recipient_role=recipient_role.value,
                message=message,
                data=data
            )
            self.db.add(notification)
            self.db.flush()

        logger.info(
            f"알림 생성: {type.value}",
            extra={'extra_data': {'notification_id': notification.id, 'recipient_role': recipient_role.value}}
        )
        return notification

    def notify_schedule_changed(self, patient_id: int, patient_name: str, therapist_ids: Iterable[str]) -> Notification:
        """주간 일정 변경 알림 (영향받는 치료사 목록 포함)"""
        therapists = sorted(set(therapist_ids))
        message = f"{patient_name}님의 주간 일정이 변경되었습니다. 영향받는 치료사: {', '.join(therapists) or '-'}"
        return self.send_notification(
            NotificationType.CRONOGRAMA_CAMBIO,
            RecipientRole.TERAPEUTA,
            message,
            patient_id=patient_id,
            data={"therapist_ids": therapists}
        )

    def notify_plan_created(self, patient_id: int, patient_name: str, total_weekly_hours: int) -> Notification:
        message = f"{patient_name}님의 치료 계획이 생성되었습니다. 총 주간 {total_weekly_hours}시간."
        return self.send_notification(
            NotificationType.PLAN_CREADO,
            RecipientRole.TERAPEUTA,
            message,
            patient_id=patient_id,
            data={"total_weekly_hours": total_weekly_hours}
        )

    def notify_plan_updated(self, patient_id: int, patient_name: str) -> Notification:
        message = f"{patient_name}님의 치료 계획이 수정되었습니다. 주간 일정 배정을 확인해주세요."
        return self.send_notification(
            NotificationType.PLAN_ACTUALIZADO,
            RecipientRole.TERAPEUTA,
            message,
            patient_id=patient_id
        )

    def mark_as_read(self, notification_id: int, role: Role) -> Notification:
        """알림 읽음 처리"""

        with read_scope(self.db):
            notification = self.db.query(Notification).filter(
                Notification.id == notification_id
            ).first()
        if not notification:
            raise NotFoundError(
                "알림을 찾을 수 없습니다.",
                error_code=ErrorCodes.NOTIFICATION_NOT_FOUND
            )

        if (notification.recipient_role not in (role.value, RecipientRole.TODOS.value)
                and role != Role.ADMIN):
            raise AuthorizationError("이 알림을 읽음 처리할 권한이 없습니다.")

        with transaction(self.db):
            notification.is_read = True
            notification.read_at = datetime.utcnow()

        return notification

    def get_unread_count(self, role: Role) -> int:
        """읽지 않은 알림 개수 조회"""

        with read_scope(self.db):
            return self._role_query(role).filter(
                Notification.is_read == False
            ).count()

    def get_notifications(
        self,
        role: Role,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False
    ) -> List[Notification]:
        """역할별 알림 목록 조회 (전체 대상 알림 포함)"""

        query = self._role_query(role)

        if unread_only:
            query = query.filter(Notification.is_read == False)

        with read_scope(self.db):
            return query.order_by(
                Notification.created_at.desc(),
                Notification.id.desc()
            ).offset(offset).limit(limit).all()

    def get_notifications_for_patient(self, patient_id: int) -> List[Notification]:
        with read_scope(self.db):
            return self.db.query(Notification).filter(
                Notification.patient_id == patient_id
            ).order_by(
                Notification.created_at.desc(),
                Notification.id.desc()
            ).all()

    def _role_query(self, role: Role):
        return self.db.query(Notification).filter(
            or_(
                Notification.recipient_role == role.value,
                Notification.recipient_role == RecipientRole.TODOS.value
            )
        )
