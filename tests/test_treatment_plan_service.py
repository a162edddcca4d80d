from datetime import date
import pytest

from rehabcare.exceptions import NotFoundError, PatientNotFound, ValidationError
from rehabcare.models import Notification, NotificationType, PlanStatus, TherapyType
from rehabcare.schemas.plan import TreatmentPlan
from rehabcare.services.treatment_plan import TreatmentPlanService

def test_create_plan_starts_active_and_notifies(db, plan_in):
    service = TreatmentPlanService(db)
    plan = plan_in()
    plan.status = PlanStatus.COMPLETED

    plan_id = service.create_plan(plan)

    saved = service.get_plan(plan_id)
    assert saved.status == PlanStatus.ACTIVE
    assert saved.patient_name == "Maria Rodriguez"
    notification = db.query(Notification).filter(
        Notification.type == NotificationType.PLAN_CREADO.value
    ).one()
    assert notification.data == {"total_weekly_hours": 7}

def test_create_plan_for_unknown_patient(db):
    plan = TreatmentPlan(
        patient_id=999,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 2, 1),
        required_weekly_hours={TherapyType.FISIOTERAPIA: 2}
    )
    with pytest.raises(PatientNotFound):
        TreatmentPlanService(db).create_plan(plan)

@pytest.mark.parametrize("hours, start, end", [
    ({}, date(2025, 1, 1), date(2025, 2, 1)),
    ({TherapyType.FISIOTERAPIA: 0}, date(2025, 1, 1), date(2025, 2, 1)),
    ({TherapyType.FISIOTERAPIA: 2}, date(2025, 3, 1), date(2025, 2, 1)),
])
def test_invalid_plans_are_rejected(db, plan_in, hours, start, end):
    with pytest.raises(ValidationError):
        TreatmentPlanService(db).create_plan(plan_in(hours, start_date=start, end_date=end))

def test_negative_hours_fail_model_validation(patient):
    with pytest.raises(ValueError):
        TreatmentPlan(patient_id=patient.id, required_weekly_hours={TherapyType.FISIOTERAPIA: -1})

def test_update_plan_keeps_status_and_replaces_hours(db, plan_in):
    service = TreatmentPlanService(db)
    plan = plan_in()
    service.create_plan(plan)

    changed = plan_in({TherapyType.PSICOLOGIA: 2})
    changed.id = plan.id
    changed.status = PlanStatus.COMPLETED
    updated = service.update_plan(changed)

    assert updated.status == PlanStatus.ACTIVE
    assert updated.required_weekly_hours == {TherapyType.PSICOLOGIA: 2}
    assert service.get_active_plan(plan.patient_id).required_weekly_hours == {TherapyType.PSICOLOGIA: 2}

def test_update_to_invalid_plan_is_rejected(db, plan_in):
    service = TreatmentPlanService(db)
    plan = plan_in()
    service.create_plan(plan)

    plan.required_weekly_hours = {TherapyType.FISIOTERAPIA: 0}
    with pytest.raises(ValidationError):
        service.update_plan(plan)

    assert service.get_plan(plan.id).required_weekly_hours[TherapyType.FISIOTERAPIA] == 4

@pytest.mark.parametrize("target", [PlanStatus.COMPLETED, PlanStatus.SUSPENDED])
def test_active_plan_can_be_closed(db, plan_in, target):
    service = TreatmentPlanService(db)
    plan = plan_in()
    service.create_plan(plan)

    assert service.change_status(plan.id, target).status == target
    assert service.get_active_plan(plan.patient_id) is None

def test_closed_plan_cannot_be_reopened(db, plan_in):
    service = TreatmentPlanService(db)
    plan = plan_in()
    service.create_plan(plan)
    service.change_status(plan.id, PlanStatus.SUSPENDED)

    with pytest.raises(ValidationError) as exc_info:
        service.change_status(plan.id, PlanStatus.ACTIVE)
    assert exc_info.value.error_code == "PLAN_004"

def test_get_missing_plan(db):
    with pytest.raises(NotFoundError):
        TreatmentPlanService(db).get_plan(42)

def test_plans_for_unknown_patient(db):
    with pytest.raises(PatientNotFound):
        TreatmentPlanService(db).get_plans_for_patient(42)

def test_plans_for_patient_newest_first(db, plan_in):
    service = TreatmentPlanService(db)
    first = plan_in(start_date=date(2024, 1, 1), end_date=date(2024, 6, 1))
    second = plan_in(start_date=date(2025, 1, 1))
    service.create_plan(first)
    service.create_plan(second)

    assert [p.id for p in service.get_plans_for_patient(first.patient_id)] == [second.id, first.id]
