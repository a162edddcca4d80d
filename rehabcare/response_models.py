"""
표준화된 API 응답 모델
"""
from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, List
from datetime import datetime

T = TypeVar('T')

class APIResponse(BaseModel, Generic[T]):
    """표준 API 응답 모델"""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)

class ListResponse(BaseModel, Generic[T]):
    """목록 응답 모델"""
    success: bool = True
    items: List[T]
    total: int
    timestamp: datetime = Field(default_factory=datetime.now)

# 공통 응답 생성 함수들
def success_response(data: T = None, message: str = None) -> APIResponse[T]:
    """성공 응답 생성"""
    return APIResponse(
        success=True,
        data=data,
        message=message,
        timestamp=datetime.now()
    )

def list_response(items: List[T]) -> ListResponse[T]:
    """목록 응답 생성"""
    return ListResponse(
        success=True,
        items=items,
        total=len(items),
        timestamp=datetime.now()
    )
