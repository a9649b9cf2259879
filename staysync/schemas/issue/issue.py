"""
Maintenance issue schemas.
"""

from typing import Optional

from pydantic import Field

from staysync.models.base.enums import IssueStatus
from staysync.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = ["IssueCreate", "IssueUpdate", "IssueResponse"]


class IssueCreate(BaseSchema):
    category: str = Field(default="Other", max_length=50)
    description: str = Field(..., min_length=1)
    photo: Optional[str] = Field(default=None, max_length=500)
    resident_id: Optional[str] = None
    reporter_name: Optional[str] = Field(default=None, max_length=200)
    reporter_contact: Optional[str] = Field(default=None, max_length=100)


class IssueUpdate(BaseSchema):
    status: IssueStatus = IssueStatus.DONE


class IssueResponse(BaseResponseSchema):
    resident_id: Optional[str] = None
    category: str
    description: str
    photo: Optional[str] = None
    status: IssueStatus
    reporter_name: Optional[str] = None
    reporter_contact: Optional[str] = None
    reporter_line_user_id: Optional[str] = None
