"""
라우터 초기화 파일
"""
from .plans import router as plans_router
from .schedule import router as schedule_router
from .notifications import router as notifications_router

__all__ = [
    "plans_router",
    "schedule_router",
    "notifications_router"
]
