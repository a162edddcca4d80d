import pytest

from rehabcare.exceptions import AuthorizationError, NotFoundError
from rehabcare.models import NotificationType, RecipientRole, Role
from rehabcare.services.notification import NotificationService

@pytest.fixture
def service(db):
    return NotificationService(db)

def test_schedule_change_lists_sorted_distinct_therapists(service, patient):
    notification = service.notify_schedule_changed(patient.id, patient.name, ["b.t", "a.t", "b.t"])

    assert notification.type == NotificationType.CRONOGRAMA_CAMBIO.value
    assert notification.recipient_role == RecipientRole.TERAPEUTA.value
    assert notification.data == {"therapist_ids": ["a.t", "b.t"]}
    assert "Maria Rodriguez" in notification.message

def test_role_inbox_includes_broadcasts(service, patient):
    service.send_notification(NotificationType.GENERAL, RecipientRole.MEDICO, "의사 전용", patient.id)
    service.send_notification(NotificationType.GENERAL, RecipientRole.TODOS, "전체 공지")
    service.notify_plan_updated(patient.id, patient.name)

    therapist_inbox = service.get_notifications(Role.TERAPEUTA)
    assert [n.message for n in therapist_inbox][-1] == "전체 공지"
    assert len(therapist_inbox) == 2
    assert service.get_unread_count(Role.MEDICO) == 2

def test_mark_as_read(service, patient):
    notification = service.notify_plan_updated(patient.id, patient.name)

    read = service.mark_as_read(notification.id, Role.TERAPEUTA)

    assert read.is_read and read.read_at is not None
    assert service.get_unread_count(Role.TERAPEUTA) == 0
    assert service.get_notifications(Role.TERAPEUTA, unread_only=True) == []

def test_mark_as_read_for_other_role_is_denied(service, patient):
    notification = service.notify_plan_updated(patient.id, patient.name)

    with pytest.raises(AuthorizationError):
        service.mark_as_read(notification.id, Role.ENFERMERIA)
    assert service.mark_as_read(notification.id, Role.ADMIN).is_read

def test_mark_missing_notification(service):
    with pytest.raises(NotFoundError):
        service.mark_as_read(999, Role.ADMIN)

def test_notifications_for_patient(service, patient, other_patient):
    service.notify_plan_created(patient.id, patient.name, 7)
    service.notify_plan_created(other_patient.id, other_patient.name, 3)

    assert [n.data["total_weekly_hours"] for n in service.get_notifications_for_patient(patient.id)] == [7]
