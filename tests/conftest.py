import os
from datetime import date, datetime, timedelta
import pytest

# 앱 코드 임포트 전에 환경 변수 설정
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DEBUG"] = "False"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker

from rehabcare.database import Base, get_db
from rehabcare.main import app
from rehabcare.models import User, Patient, Role, TherapyType
from rehabcare.schemas.plan import TreatmentPlan
from rehabcare.schemas.session import ProposedSession
from rehabcare.services.auth import create_access_token

# 인메모리 DB (모든 세션이 하나의 연결을 공유)
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

# 2025-03-03 은 월요일
WEEK_START = date(2025, 3, 3)

def at(day_offset: int, hour: int = 9, week_start: date = WEEK_START) -> datetime:
    """주 시작일 기준 상대 시각"""
    return datetime.combine(week_start + timedelta(days=day_offset), datetime.min.time()) + timedelta(hours=hour)

def proposed(therapist_id, therapy_type, day_offset, minutes=60, hour=9, week_start=WEEK_START):
    return ProposedSession(
        therapist_id=therapist_id,
        therapy_type=therapy_type,
        start_datetime=at(day_offset, hour, week_start),
        duration_minutes=minutes
    )

@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def patient(db):
    patient = Patient(
        name="Maria Rodriguez",
        document="12345678",
        birth_date=date(1980, 6, 10),
        diagnosis="ACV isquémico con hemiparesia derecha.",
        room="101"
    )
    db.add(patient)
    db.commit()
    db.refresh(patient)
    return patient

@pytest.fixture
def other_patient(db):
    patient = Patient(name="Juan Perez", document="23456789", diagnosis="Lesión medular incompleta T12.")
    db.add(patient)
    db.commit()
    db.refresh(patient)
    return patient

@pytest.fixture
def users(db):
    """역할별 사용자 (로그인 테스트 외에는 비밀번호 해시를 쓰지 않음)"""
    created = {}
    for username, role in [
        ("dr.juarez", Role.MEDICO),
        ("luz.terapeuta", Role.TERAPEUTA),
        ("admin", Role.ADMIN),
    ]:
        user = User(username=username, password_hash="not-a-hash", role=role.value, is_active=True)
        db.add(user)
        created[role] = user
    db.commit()
    return created

@pytest.fixture
def plan_in(patient):
    """플랜 생성 입력 팩토리"""
    def make(hours=None, start_date=date(2025, 1, 1), end_date=date(2025, 12, 31), observations=""):
        return TreatmentPlan(
            patient_id=patient.id,
            start_date=start_date,
            end_date=end_date,
            observations=observations,
            required_weekly_hours=hours if hours is not None else {
                TherapyType.FISIOTERAPIA: 4,
                TherapyType.TERAPIA_OCUPACIONAL: 3,
            }
        )
    return make

@pytest.fixture
def client(db):
    with TestClient(app) as test_client:
        yield test_client

def auth_headers(username: str) -> dict:
    token = create_access_token(data={"sub": username})
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def medico_headers(users):
    return auth_headers("dr.juarez")

@pytest.fixture
def terapeuta_headers(users):
    return auth_headers("luz.terapeuta")

@pytest.fixture
def admin_headers(users):
    return auth_headers("admin")
