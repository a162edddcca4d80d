from rehabcare.models import User, Role
from rehabcare.services.auth import get_password_hash
from conftest import WEEK_START, at

PLAN_BODY = {
    "start_date": "2025-01-01",
    "end_date": "2025-12-31",
    "observations": "ACV 후 재활",
    "required_weekly_hours": {"Fisioterapia": 4, "Terapia Ocupacional": 3},
}

def week_body(to_sessions=3, day_offset_extra=None):
    sessions = [
        {"therapist_id": "luz.terapeuta", "therapy_type": "Fisioterapia",
         "start_datetime": at(day).isoformat(), "duration_minutes": 60}
        for day in range(4)
    ]
    sessions += [
        {"therapist_id": "ana.to", "therapy_type": "Terapia Ocupacional",
         "start_datetime": at(day, 11).isoformat(), "duration_minutes": 60}
        for day in range(to_sessions)
    ]
    if day_offset_extra is not None:
        sessions.append({"therapist_id": "ana.to", "therapy_type": "Fisioterapia",
                         "start_datetime": at(day_offset_extra).isoformat(), "duration_minutes": 60})
    return {"sessions": sessions}

def create_plan(client, headers, patient_id):
    response = client.post("/api/plans", json={"patient_id": patient_id, **PLAN_BODY}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]

def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").json()["status"] == "running"

def test_login_returns_token_for_active_user(client, db):
    db.add(User(username="dr.juarez", password_hash=get_password_hash("medico123"), role=Role.MEDICO.value))
    db.commit()

    response = client.post("/api/auth/login", json={"username": "dr.juarez", "password": "medico123"})
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "MEDICO"

    me = client.get("/api/plans/active", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200

def test_login_with_wrong_password(client, db):
    db.add(User(username="dr.juarez", password_hash=get_password_hash("medico123"), role=Role.MEDICO.value))
    db.commit()

    response = client.post("/api/auth/login", json={"username": "dr.juarez", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["error_code"] == "AUTH_001"

def test_requests_without_token_are_unauthorized(client, patient):
    assert client.get("/api/plans/active").status_code == 401
    assert client.get("/api/plans/active", headers={"Authorization": "Bearer garbage"}).status_code == 401

def test_medico_creates_and_reads_plan(client, medico_headers, terapeuta_headers, patient):
    plan = create_plan(client, medico_headers, patient.id)

    assert plan["status"] == "Active"
    assert plan["total_hours"] == 7
    assert plan["patient_name"] == "Maria Rodriguez"

    fetched = client.get(f"/api/plans/{plan['id']}", headers=terapeuta_headers).json()["data"]
    assert fetched["required_weekly_hours"] == {"Fisioterapia": 4, "Terapia Ocupacional": 3}

    active = client.get(f"/api/patients/{patient.id}/plans/active", headers=terapeuta_headers).json()
    assert active["data"]["id"] == plan["id"]

def test_therapist_cannot_create_plan(client, terapeuta_headers, patient):
    response = client.post("/api/plans", json={"patient_id": patient.id, **PLAN_BODY}, headers=terapeuta_headers)

    assert response.status_code == 403
    assert response.json()["error_code"] == "AUTH_003"

def test_invalid_plan_body_is_rejected(client, medico_headers, patient):
    body = {**PLAN_BODY, "patient_id": patient.id, "required_weekly_hours": {"Fisioterapia": 0}}
    assert client.post("/api/plans", json=body, headers=medico_headers).status_code == 422

    body = {**PLAN_BODY, "patient_id": patient.id, "required_weekly_hours": {"Yoga": 2}}
    assert client.post("/api/plans", json=body, headers=medico_headers).status_code == 422

def test_plan_for_unknown_patient(client, medico_headers, patient):
    response = client.post("/api/plans", json={"patient_id": 999, **PLAN_BODY}, headers=medico_headers)

    assert response.status_code == 404
    assert response.json()["error_code"] == "PAT_001"

def test_update_and_status_change(client, medico_headers, patient):
    plan = create_plan(client, medico_headers, patient.id)

    body = {**PLAN_BODY, "required_weekly_hours": {"Psicologia": 2}}
    updated = client.put(f"/api/plans/{plan['id']}", json=body, headers=medico_headers).json()["data"]
    assert updated["required_weekly_hours"] == {"Psicologia": 2}

    response = client.patch(f"/api/plans/{plan['id']}/status", json={"status": "Completed"}, headers=medico_headers)
    assert response.json()["data"]["status"] == "Completed"

    response = client.patch(f"/api/plans/{plan['id']}/status", json={"status": "Active"}, headers=medico_headers)
    assert response.status_code == 400
    assert response.json()["error_code"] == "PLAN_004"

    active = client.get(f"/api/patients/{patient.id}/plans/active", headers=medico_headers).json()
    assert active["data"] is None

def test_delete_plan(client, medico_headers, patient):
    plan = create_plan(client, medico_headers, patient.id)

    assert client.delete(f"/api/plans/{plan['id']}", headers=medico_headers).status_code == 200
    assert client.get(f"/api/plans/{plan['id']}", headers=medico_headers).status_code == 404
    assert client.get(f"/api/patients/{patient.id}/plans", headers=medico_headers).json()["total"] == 0

def test_plan_week_commits_and_lists_sessions(client, medico_headers, terapeuta_headers, patient):
    create_plan(client, medico_headers, patient.id)

    response = client.post(
        f"/api/patients/{patient.id}/weeks/2025-03-05", json=week_body(to_sessions=2), headers=medico_headers
    )
    assert response.status_code == 200
    report = response.json()["data"]
    assert report["committed"] is True
    assert report["week_start"] == WEEK_START.isoformat()
    assert [a["severity"] for a in report["alerts"]] == ["WARNING"]
    assert report["assigned_hours_by_type"] == {"Fisioterapia": 4, "Terapia Ocupacional": 2}

    sessions = client.get(
        f"/api/patients/{patient.id}/weeks/{WEEK_START.isoformat()}/sessions", headers=terapeuta_headers
    ).json()
    assert sessions["total"] == 6

    agenda = client.get(
        "/api/therapists/luz.terapeuta/sessions", params={"day": WEEK_START.isoformat()}, headers=terapeuta_headers
    ).json()
    assert agenda["total"] == 1

    everything = client.get(
        "/api/sessions", params={"date_from": "2025-03-03", "date_to": "2025-03-09"}, headers=terapeuta_headers
    ).json()
    assert everything["total"] == 6

def test_plan_week_declined_when_critical(client, medico_headers, patient):
    create_plan(client, medico_headers, patient.id)

    response = client.post(f"/api/patients/{patient.id}/weeks/2025-03-03", json={"sessions": []}, headers=medico_headers)

    report = response.json()["data"]
    assert response.status_code == 200
    assert report["committed"] is False
    assert {a["severity"] for a in report["alerts"]} == {"CRITICAL"}

def test_plan_week_out_of_range(client, medico_headers, patient):
    create_plan(client, medico_headers, patient.id)

    response = client.post(
        f"/api/patients/{patient.id}/weeks/2025-03-03", json=week_body(day_offset_extra=7), headers=medico_headers
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "SCHED_001"

def test_plan_week_without_active_plan(client, medico_headers, patient):
    response = client.post(f"/api/patients/{patient.id}/weeks/2025-03-03", json=week_body(), headers=medico_headers)

    assert response.status_code == 404
    assert response.json()["error_code"] == "PLAN_003"

def test_therapist_cannot_plan_week(client, medico_headers, terapeuta_headers, patient):
    create_plan(client, medico_headers, patient.id)

    response = client.post(f"/api/patients/{patient.id}/weeks/2025-03-03", json=week_body(), headers=terapeuta_headers)
    assert response.status_code == 403

def test_session_range_must_be_ordered(client, terapeuta_headers):
    response = client.get(
        "/api/sessions", params={"date_from": "2025-03-09", "date_to": "2025-03-03"}, headers=terapeuta_headers
    )
    assert response.status_code == 400

def test_therapist_inbox_after_schedule_change(client, medico_headers, terapeuta_headers, patient):
    create_plan(client, medico_headers, patient.id)
    client.post(f"/api/patients/{patient.id}/weeks/2025-03-03", json=week_body(), headers=medico_headers)

    assert client.get("/api/notifications/unread-count", headers=terapeuta_headers).json()["data"]["unread_count"] == 2

    inbox = client.get("/api/notifications", headers=terapeuta_headers).json()
    assert inbox["items"][0]["type"] == "CRONOGRAMA_CAMBIO"
    assert inbox["items"][0]["data"]["therapist_ids"] == ["ana.to", "luz.terapeuta"]

    read = client.post(f"/api/notifications/{inbox['items'][0]['id']}/read", headers=terapeuta_headers)
    assert read.json()["data"]["is_read"] is True
    assert client.get("/api/notifications/unread-count", headers=terapeuta_headers).json()["data"]["unread_count"] == 1

    assert client.get("/api/notifications", headers=medico_headers).json()["total"] == 0
