from pydantic import BaseModel, Field
from typing import Optional

from rehabcare.models.enums import Role

class UserLogin(BaseModel):
    username: str = Field(..., min_length=1, max_length=40)
    password: str = Field(..., min_length=1)

class AuthSession(BaseModel):
    """요청마다 명시적으로 전달되는 인증 정보 (전역 싱글톤 없음)"""
    user_id: int
    username: str
    role: Role

class LoginResponse(BaseModel):
    """로그인 응답 모델"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # 초 단위
    role: Role
    user_info: Optional[dict] = None
