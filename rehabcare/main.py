from fastapi import FastAPI, HTTPException, Depends, status
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime
from sqlalchemy.orm import Session
from rehabcare.config import settings
from rehabcare.database import get_db
from rehabcare.models import Role
from rehabcare.schemas.user import UserLogin, LoginResponse
from rehabcare.services.auth import authenticate_user, create_access_token

from rehabcare.exceptions import http_exception_handler, general_exception_handler, ErrorCodes, StandardHTTPException
from rehabcare.logging_config import LoggingMiddleware, setup_logging, log_security_event

# 라우터 임포트
from rehabcare.routers import plans_router, schedule_router, notifications_router

# 로깅 설정
setup_logging(settings.log_level, settings.log_file)

# 태그 설명 정의
tags_metadata = [
    {
        "name": "auth",
        "description": "사용자 인증 관련 API (로그인)",
    },
    {
        "name": "plans",
        "description": "치료 계획 API (생성, 수정, 상태 변경, 조회)",
    },
    {
        "name": "schedule",
        "description": "주간 일정 API (주간 편성, 준수 보고서, 치료사 일정)",
    },
    {
        "name": "notifications",
        "description": "알림 API (역할별 알림 조회, 읽음 처리)",
    }
]

# FastAPI 앱 생성
app = FastAPI(
    title="RehabCare Scheduling API",
    description="""
## 재활 치료 주간 일정 편성 API

### 주요 기능
- **치료 계획**: 환자별 치료 유형/주간 필요 시간 관리
- **주간 편성**: 제안 세션을 계획과 비교해 CRITICAL/WARNING/INFO 경고 생성
- **원자적 교체**: CRITICAL 경고가 없을 때만 한 주 일정을 통째로 교체
- **알림**: 일정 변경 시 치료사 대상 알림 생성

### 테스트 계정
- 의사: `dr.juarez` / `medico123`
- 치료사: `luz.terapeuta` / `terapia123`
- 간호사: `pablo.enfermero` / `enfermeria123`
- 관리자: `admin` / `admin123`
    """,
    version=settings.app_version,
    openapi_tags=tags_metadata,
    debug=settings.debug
)

# 미들웨어 추가
app.add_middleware(LoggingMiddleware)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 예외 핸들러 등록
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# 라우터 연결
app.include_router(plans_router, prefix="/api", tags=["plans"])
app.include_router(schedule_router, prefix="/api", tags=["schedule"])
app.include_router(notifications_router, prefix="/api/notifications", tags=["notifications"])

@app.get("/")
async def root():
    return {"message": "RehabCare Scheduling API", "version": settings.app_version, "status": "running"}

@app.get("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}

# 인증 관련 API
@app.post("/api/auth/login", response_model=LoginResponse, tags=["auth"])
async def login(user_credentials: UserLogin, db: Session = Depends(get_db)):
    """사용자 로그인"""
    user = authenticate_user(db, user_credentials.username, user_credentials.password)
    if not user:
        log_security_event("login_failed", details={"username": user_credentials.username})
        raise StandardHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="사용자명 또는 비밀번호가 올바르지 않습니다",
            error_code=ErrorCodes.INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": user.username, "role": user.role})

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
        role=Role(user.role),
        user_info={"id": user.id, "username": user.username}
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
