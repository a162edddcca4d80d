from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from rehabcare.config import settings
from rehabcare.database import get_db
from rehabcare.exceptions import AuthorizationError, raise_unauthorized
from rehabcare.logging_config import log_security_event
from rehabcare.models import User, Role
from rehabcare.schemas.user import AuthSession

# 암호화 설정
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
security = HTTPBearer(auto_error=False)

def verify_password(plain_password, hashed_password):
    """비밀번호 검증"""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    """비밀번호 해싱"""
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """JWT 토큰 생성"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt

def authenticate_user(db: Session, username: str, password: str):
    """사용자 인증"""
    user = db.query(User).filter(User.username == username, User.is_active == True).first()
    if not user:
        return False
    if not verify_password(password, user.password_hash):
        return False
    return user

def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> AuthSession:
    """요청별 인증 세션 생성"""
    if credentials is None:
        raise_unauthorized()

    try:
        payload = jwt.decode(credentials.credentials, settings.secret_key, algorithms=[settings.algorithm])
        username: str = payload.get("sub")
        if username is None:
            raise_unauthorized("Could not validate credentials")
    except JWTError:
        raise_unauthorized("Could not validate credentials")

    user = db.query(User).filter(User.username == username, User.is_active == True).first()
    if user is None:
        raise_unauthorized("Could not validate credentials")

    return AuthSession(user_id=user.id, username=user.username, role=Role(user.role))

class AuthorizationGate:
    """계획/일정 변경 권한 확인"""

    def __init__(self, scheduler_roles=None):
        roles = scheduler_roles if scheduler_roles is not None else settings.scheduler_roles
        self.scheduler_roles = {Role(r) for r in roles}

    def caller_may_schedule_for(self, auth: AuthSession, patient_id: int) -> bool:
        return auth.role in self.scheduler_roles

    def require_scheduler(self, auth: AuthSession, patient_id: int) -> AuthSession:
        if not self.caller_may_schedule_for(auth, patient_id):
            log_security_event(
                "schedule_permission_denied",
                user_id=auth.user_id,
                details={"role": auth.role.value, "patient_id": patient_id}
            )
            raise AuthorizationError("치료 계획과 주간 일정은 의사만 변경할 수 있습니다.")
        return auth

def get_authorization_gate() -> AuthorizationGate:
    return AuthorizationGate()
