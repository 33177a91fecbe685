"""
Domain exceptions mapped onto HTTP status codes.
"""
from typing import Any, Dict


class ProjectITError(Exception):
    """Base error for the service."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class InvalidEntityTypeError(ProjectITError):
    """Entity type is not in the whitelist."""

    status_code = 400

    def __init__(self, entity_type: str):
        super().__init__(f"Invalid entity type: {entity_type}")
        self.entity_type = entity_type


class EntityNotFoundError(ProjectITError):
    """Record lookup by id failed."""

    status_code = 404

    def __init__(self, entity_type: str, entity_id: str):
        super().__init__("Record not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class WebhookAuthenticationError(ProjectITError):
    """Inbound webhook failed secret or API key validation."""

    status_code = 401


class IntegrationNotConfiguredError(ProjectITError):
    status_code = 400


class IntegrationRequestError(ProjectITError):
    """Outbound call to a third-party API failed."""

    status_code = 502

    def __init__(self, message: str, status_code: int = None, details: str = None):
        super().__init__(message, status_code=status_code)
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.details is not None:
            body["details"] = self.details
        return body
