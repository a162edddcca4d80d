"""
표준화된 에러 응답 시스템
"""
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from datetime import date, datetime
import traceback

class StandardHTTPException(HTTPException):
    """표준화된 HTTP 예외"""

    def __init__(
        self,
        status_code: int,
        detail: str = None,
        error_code: str = None,
        headers: dict = None
    ):
        super().__init__(status_code, detail, headers)
        self.error_code = error_code or f"HTTP_{status_code}"

# 에러 코드 정의
class ErrorCodes:
    # 인증 관련
    INVALID_CREDENTIALS = "AUTH_001"
    TOKEN_EXPIRED = "AUTH_002"
    INSUFFICIENT_PERMISSIONS = "AUTH_003"

    # 환자 관련
    PATIENT_NOT_FOUND = "PAT_001"

    # 치료 계획 관련
    INVALID_PLAN = "PLAN_001"
    PLAN_NOT_FOUND = "PLAN_002"
    NO_ACTIVE_PLAN = "PLAN_003"
    INVALID_STATUS_TRANSITION = "PLAN_004"

    # 주간 일정 관련
    SESSION_OUT_OF_WEEK = "SCHED_001"
    SESSION_NOT_FOUND = "SCHED_002"

    # 알림 관련
    NOTIFICATION_NOT_FOUND = "NOTI_001"

    # 데이터베이스 관련
    DATABASE_ERROR = "DB_001"

async def http_exception_handler(request: Request, exc: HTTPException):
    """HTTP 예외 핸들러"""

    error_code = getattr(exc, 'error_code', f"HTTP_{exc.status_code}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "detail": exc.detail,
            "error_code": error_code,
            "timestamp": datetime.now().isoformat(),
            "path": str(request.url.path)
        },
        headers=getattr(exc, "headers", None)
    )

async def general_exception_handler(request: Request, exc: Exception):
    """일반 예외 핸들러"""

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "detail": "내부 서버 오류가 발생했습니다",
            "error_code": "INTERNAL_SERVER_ERROR",
            "timestamp": datetime.now().isoformat(),
            "path": str(request.url.path),
            # 개발 환경에서만 스택 트레이스 포함
            **({"traceback": traceback.format_exc()} if request.app.debug else {})
        }
    )

# === 일정 편성 도메인 예외들 ===

class ValidationError(StandardHTTPException):
    """호출자가 수정 가능한 입력 오류 (자동 재시도 금지)"""
    def __init__(self, message: str, error_code: str = None):
        super().__init__(
            status_code=400,
            detail=message,
            error_code=error_code or ErrorCodes.INVALID_PLAN
        )

class OutOfWeekRange(ValidationError):
    """주간 범위를 벗어난 세션 예외"""
    def __init__(self, offending_date: date, week_start: date):
        self.offending_date = offending_date
        self.week_start = week_start
        super().__init__(
            f"{offending_date.isoformat()} 세션은 {week_start.isoformat()} 주간에 포함되지 않습니다.",
            error_code=ErrorCodes.SESSION_OUT_OF_WEEK
        )

class NotFoundError(StandardHTTPException):
    """리소스 없음 예외"""
    def __init__(self, message: str, error_code: str = None):
        super().__init__(
            status_code=404,
            detail=message,
            error_code=error_code or ErrorCodes.PLAN_NOT_FOUND
        )

class PlanNotFound(NotFoundError):
    """활성 치료 계획 없음 예외"""
    def __init__(self, patient_id: int):
        self.patient_id = patient_id
        super().__init__(
            f"환자 {patient_id}의 활성 치료 계획이 없습니다.",
            error_code=ErrorCodes.NO_ACTIVE_PLAN
        )

class PatientNotFound(NotFoundError):
    """환자 없음 예외"""
    def __init__(self, patient_id: int):
        self.patient_id = patient_id
        super().__init__(
            f"환자 {patient_id}을(를) 찾을 수 없습니다.",
            error_code=ErrorCodes.PATIENT_NOT_FOUND
        )

class AuthorizationError(StandardHTTPException):
    """권한 부족 예외"""
    def __init__(self, message: str = "권한이 부족합니다"):
        super().__init__(
            status_code=403,
            detail=message,
            error_code=ErrorCodes.INSUFFICIENT_PERMISSIONS
        )

class PersistenceError(StandardHTTPException):
    """저장소 I/O 또는 트랜잭션 실패 (항상 전체 롤백)"""
    def __init__(self, message: str = "데이터 저장 중 오류가 발생했습니다"):
        super().__init__(
            status_code=500,
            detail=message,
            error_code=ErrorCodes.DATABASE_ERROR
        )

# 공통 예외 함수들
def raise_unauthorized(message: str = "인증이 필요합니다"):
    """401 Unauthorized 예외 발생"""
    raise StandardHTTPException(
        status_code=401,
        detail=message,
        error_code=ErrorCodes.INVALID_CREDENTIALS,
        headers={"WWW-Authenticate": "Bearer"}
    )
