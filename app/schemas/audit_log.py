"""
Leave audit log schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_serializer, ConfigDict
from app.models.leave import LeaveStatus
from app.utils.datetime_utils import iso_utc


class LeaveAuditLogOut(BaseModel):
    id: int
    leave_request_id: int
    actor_id: int
    action: str
    previous_status: Optional[LeaveStatus] = None
    new_status: Optional[LeaveStatus] = None
    remarks: Optional[str] = None
    pto_deducted: Optional[int] = None
    is_lwop: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", when_used="always")
    @classmethod
    def _ser_datetime(cls, dt):
        return iso_utc(dt)
