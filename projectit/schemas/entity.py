"""
Entity endpoint request schemas.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class EntityFilterRequest(BaseModel):
    """Body of ``POST /entities/{type}/filter``."""
    filter: Dict[str, Any] = Field(default_factory=dict)
    sort: Optional[str] = None
    limit: Optional[int] = None


class IntegrationSettingsUpdate(BaseModel):
    """Admin update of the singleton integration settings record.

    Only the common fields are declared; any other key is stored as sent.
    """
    model_config = ConfigDict(extra="allow")

    halopsa_enabled: Optional[bool] = None
    quoteit_enabled: Optional[bool] = None
    quoteit_api_url: Optional[str] = None
    quoteit_api_key: Optional[str] = None
    gammastack_api_key: Optional[str] = None
    gammaai_webhook_secret: Optional[str] = None
    resend_enabled: Optional[bool] = None
    resend_api_key: Optional[str] = None
    resend_from_email: Optional[str] = None
    resend_from_name: Optional[str] = None


class EmailTestRequest(BaseModel):
    to: str
