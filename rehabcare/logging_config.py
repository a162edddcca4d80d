"""
구조화된 로깅 시스템
"""
import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional, Iterable
import time

class StructuredFormatter(logging.Formatter):
    """구조화된 로그 포맷터"""

    def format(self, record):
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        # 추가 컨텍스트 정보 포함
        if hasattr(record, 'user_id'):
            log_data['user_id'] = record.user_id
        if hasattr(record, 'request_id'):
            log_data['request_id'] = record.request_id
        if hasattr(record, 'execution_time'):
            log_data['execution_time'] = record.execution_time
        if hasattr(record, 'extra_data'):
            log_data['extra_data'] = record.extra_data
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)

def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """로깅 설정 (중복 호출 시 핸들러를 다시 붙이지 않음)"""

    # 루트 로거 설정
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if any(isinstance(h.formatter, StructuredFormatter) for h in logger.handlers):
        return logger

    # 핸들러 생성
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    # 포맷터 설정 및 핸들러 추가
    structured_formatter = StructuredFormatter()
    for handler in handlers:
        handler.setFormatter(structured_formatter)
        logger.addHandler(handler)

    return logger

def get_logger(name: str) -> logging.Logger:
    """로거 인스턴스 반환"""
    return logging.getLogger(name)

def log_database_operation(operation: str, table: str, record_id: Optional[int] = None, details: Dict[str, Any] = None):
    """데이터베이스 작업 로깅"""
    logger = get_logger("database")
    logger.info(
        f"DB 작업: {operation}",
        extra={
            'extra_data': {
                'operation': operation,
                'table': table,
                'record_id': record_id,
                'details': details or {}
            }
        }
    )

def log_user_action(user_id: int, action: str, details: Dict[str, Any] = None):
    """사용자 액션 로깅"""
    logger = get_logger("user_action")
    logger.info(
        f"사용자 액션: {action}",
        extra={
            'user_id': user_id,
            'extra_data': {
                'action': action,
                'details': details or {}
            }
        }
    )

def log_schedule_evaluation(patient_id: int, week_start, alert_counts: Dict[str, int], committed: bool, therapist_ids: Iterable[str] = ()):
    """주간 일정 평가 로깅"""
    logger = get_logger("scheduling")
    logger.info(
        f"주간 일정 평가 완료: patient={patient_id} week={week_start}",
        extra={
            'extra_data': {
                'patient_id': patient_id,
                'week_start': str(week_start),
                'alerts': alert_counts,
                'committed': committed,
                'therapist_ids': sorted(therapist_ids)
            }
        }
    )

def log_security_event(event_type: str, user_id: Optional[int] = None, ip_address: str = None, details: Dict[str, Any] = None):
    """보안 이벤트 로깅"""
    logger = get_logger("security")
    logger.warning(
        f"보안 이벤트: {event_type}",
        extra={
            'user_id': user_id,
            'extra_data': {
                'event_type': event_type,
                'ip_address': ip_address,
                'details': details or {}
            }
        }
    )

class LoggingMiddleware:
    """로깅 미들웨어"""

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("middleware")

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http":
            start_time = time.time()

            # 요청 정보 추출
            method = scope["method"]
            path = scope["path"]
            client = scope.get("client") or ("unknown", 0)
            client_ip = client[0]

            # 요청 로깅
            self.logger.info(
                f"HTTP 요청: {method} {path}",
                extra={
                    'extra_data': {
                        'method': method,
                        'path': path,
                        'client_ip': client_ip
                    }
                }
            )

            # 응답 후 로깅을 위한 래퍼
            async def send_wrapper(message):
                if message["type"] == "http.response.start":
                    status_code = message["status"]
                    execution_time = time.time() - start_time

                    # 응답 로깅
                    self.logger.info(
                        f"HTTP 응답: {method} {path} - {status_code}",
                        extra={
                            'execution_time': execution_time,
                            'extra_data': {
                                'method': method,
                                'path': path,
                                'status_code': status_code,
                                'client_ip': client_ip
                            }
                        }
                    )

                await send(message)

            await self.app(scope, receive, send_wrapper)
        else:
            await self.app(scope, receive, send)
