from contextlib import contextmanager
from typing import Iterable, List

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker
from .config import settings
from .exceptions import PersistenceError
from .logging_config import get_logger

logger = get_logger("database")

# SQLAlchemy 설정 (SQLite는 스레드풀 요청 처리를 위해 동일 스레드 검사 해제)
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, echo=settings.database_echo, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

_TX_DEPTH = "rehabcare_tx_depth"

# 데이터베이스 의존성
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def transaction(db: Session):
    """트랜잭션 범위

    가장 바깥 범위에서만 commit 하고, 내부 범위는 바깥 트랜잭션에 합류한다.
    실패 시 전체 롤백하며 SQLAlchemy 오류는 PersistenceError로 감싼다.
    """
    depth = db.info.get(_TX_DEPTH, 0)
    db.info[_TX_DEPTH] = depth + 1
    try:
        yield db
        if depth == 0:
            db.commit()
    except SQLAlchemyError as e:
        if depth == 0:
            db.rollback()
        logger.error(f"트랜잭션 실패: {e}")
        raise PersistenceError(f"데이터 저장 중 오류가 발생했습니다: {e}") from e
    except Exception:
        if depth == 0:
            db.rollback()
        raise
    finally:
        db.info[_TX_DEPTH] = depth

@contextmanager
def read_scope(db: Session):
    """조회 범위 (커밋 없음). SQLAlchemy 오류는 PersistenceError로 감싼다."""
    try:
        yield db
    except SQLAlchemyError as e:
        if db.info.get(_TX_DEPTH, 0) == 0:
            db.rollback()
        logger.error(f"조회 실패: {e}")
        raise PersistenceError(f"데이터 조회 중 오류가 발생했습니다: {e}") from e

def replace_set(db: Session, model, criteria: Iterable, rows: List) -> List:
    """조건에 해당하는 행 집합 전체를 새 행 집합으로 교체 (병합 아님)"""
    with transaction(db):
        deleted = db.query(model).filter(*criteria).delete(synchronize_session=False)
        # 유니크 제약 충돌을 피하려면 삭제가 삽입보다 먼저 반영되어야 함
        db.flush()
        db.add_all(rows)
        db.flush()

    logger.info(
        f"집합 교체: {model.__tablename__}",
        extra={'extra_data': {'table': model.__tablename__, 'deleted': deleted, 'inserted': len(rows)}}
    )
    return rows
