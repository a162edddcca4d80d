from datetime import date
from sqlalchemy.orm import sessionmaker
from rehabcare.models import *
from rehabcare.database import Base, engine
from rehabcare.schemas.plan import TreatmentPlan
from rehabcare.services.auth import get_password_hash
from rehabcare.services.treatment_plan import TreatmentPlanService

USERS = [
    ("admin", "admin123", Role.ADMIN),
    ("dr.juarez", "medico123", Role.MEDICO),
    ("luz.terapeuta", "terapia123", Role.TERAPEUTA),
    ("pablo.enfermero", "enfermeria123", Role.ENFERMERIA),
]

PATIENTS = [
    ("Maria Rodriguez", "12345678", date(1980, 6, 10),
     "ACV isquémico con hemiparesia derecha.", "101", "Activo"),
    ("Juan Perez", "23456789", date(1975, 9, 15),
     "Lesión medular incompleta T12.", "102", "Activo"),
    ("Carmen Sánchez", "34567890", date(1992, 12, 1),
     "Fractura de cadera con complicaciones.", "201", "Activo"),
    ("Roberto Martinez", "45678901", date(1985, 3, 20),
     "Traumatismo craneoencefálico.", "203", "Alta"),
]

# 환자 문서번호 -> (시작일, 종료일, 메모, 유형별 주간 시간)
PLANS = {
    "12345678": (date(2025, 1, 1), date(2025, 4, 1), "ACV 후 통합 재활. 이동성과 자립 중심.", {
        TherapyType.FISIOTERAPIA: 4,
        TherapyType.TERAPIA_OCUPACIONAL: 3,
        TherapyType.PSICOLOGIA: 2,
    }),
    "23456789": (date(2025, 1, 15), date(2025, 7, 15), "척수 손상 재활. 근력 강화 집중.", {
        TherapyType.FISIOTERAPIA: 5,
        TherapyType.TERAPIA_OCUPACIONAL: 3,
        TherapyType.PSICOLOGIA: 2,
        TherapyType.HIDROTERAPIA: 2,
    }),
    "34567890": (date(2025, 2, 1), date(2025, 5, 1), "고관절 골절 후 단계적 부하 증가.", {
        TherapyType.FISIOTERAPIA: 3,
        TherapyType.TERAPIA_OCUPACIONAL: 2,
    }),
}

def create_seed_data():
    """시드 데이터 생성"""
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()

    try:
        print("시드 데이터 생성을 시작합니다...")

        # 기존 데이터 삭제 (중복 방지)
        print("기존 데이터를 정리합니다...")
        db.query(Notification).delete()
        db.query(ScheduledSession).delete()
        db.query(PlanDetail).delete()
        db.query(Plan).delete()
        db.query(Patient).delete()
        db.query(User).delete()
        db.commit()

        print("사용자를 생성합니다...")
        for username, password, role in USERS:
            db.add(User(
                username=username,
                password_hash=get_password_hash(password),
                role=role.value,
                is_active=True
            ))
        db.commit()

        print("환자 정보를 생성합니다...")
        patients = {}
        for name, document, birth_date, diagnosis, room, status in PATIENTS:
            patient = Patient(
                name=name,
                document=document,
                birth_date=birth_date,
                diagnosis=diagnosis,
                room=room,
                status=status
            )
            db.add(patient)
            patients[document] = patient
        db.commit()

        print("치료 계획을 생성합니다...")
        service = TreatmentPlanService(db)
        for document, (start_date, end_date, observations, hours) in PLANS.items():
            service.create_plan(TreatmentPlan(
                patient_id=patients[document].id,
                start_date=start_date,
                end_date=end_date,
                observations=observations,
                required_weekly_hours=hours
            ))

        print("시드 데이터가 성공적으로 생성되었습니다.")
        print("\n사용자 계정:")
        for username, password, role in USERS:
            print(f"- {role.value}: {username} / {password}")
        print(f"\n생성된 데이터:")
        print(f"- 사용자: {db.query(User).count()}명")
        print(f"- 환자: {db.query(Patient).count()}명")
        print(f"- 치료 계획: {db.query(Plan).count()}건")

    except Exception as e:
        print(f"시드 데이터 생성 중 오류 발생: {e}")
        db.rollback()
        raise e
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()
