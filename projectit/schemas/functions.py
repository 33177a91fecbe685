"""
Request and response bodies for the RPC-style function endpoints.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class NotificationEmailRequest(BaseModel):
    """Instant notification email for one recipient."""
    model_config = ConfigDict(populate_by_name=True)

    to: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    project_id: Optional[str] = Field(None, alias="projectId")
    project_name: Optional[str] = Field(None, alias="projectName")
    from_user_name: Optional[str] = Field(None, alias="fromUserName")
    link: Optional[str] = None


class SendEmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: str
    subject: str
    html: Optional[str] = None
    text: Optional[str] = None
    test_only: bool = Field(False, alias="testOnly")


class LinkQuoteRequest(BaseModel):
    quote_id: Optional[str] = None
    project_id: Optional[str] = None
    project_number: Optional[Any] = None


class SweepResult(BaseModel):
    """Totals from one due-date reminder sweep."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    reminders_sent: int = Field(0, alias="remindersSent")
    overdues_sent: int = Field(0, alias="overduesSent")
    tasks_checked: int = Field(0, alias="tasksChecked")
    email_failures: int = Field(0, alias="emailFailures")

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
