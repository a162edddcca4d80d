from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime

from rehabcare.models.enums import NotificationType, RecipientRole

class NotificationResponse(BaseModel):
    id: int
    patient_id: Optional[int] = None
    type: NotificationType
    recipient_role: RecipientRole
    message: str
    data: Optional[Dict[str, Any]] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
