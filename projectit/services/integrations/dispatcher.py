"""
Exact-match routing of webhook events to handlers.
"""
import inspect
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Union

import structlog

from projectit.schemas.webhook import WebhookResult

logger = structlog.get_logger(__name__)

Handler = Callable[..., Union[WebhookResult, Awaitable[WebhookResult]]]


class EventDispatcher:
    """Maps event-type strings to handlers.

    Unknown event types are acknowledged with a successful result so that the
    sender does not retry them.
    """

    def __init__(self, integration: str):
        self.integration = integration
        self._handlers: Dict[str, Handler] = {}

    def register(self, event_types: Union[str, Iterable[str]], handler: Handler) -> None:
        if isinstance(event_types, str):
            event_types = [event_types]
        for event_type in event_types:
            self._handlers[event_type] = handler

    def handler_for(self, event_type: Optional[str]) -> Optional[Handler]:
        if event_type is None:
            return None
        return self._handlers.get(event_type)

    @property
    def event_types(self) -> frozenset:
        return frozenset(self._handlers)

    async def dispatch(self, event_type: Optional[str], *args: Any) -> WebhookResult:
        """Invoke the single handler registered for ``event_type`` with ``args``."""
        handler = self.handler_for(event_type)
        if handler is None:
            logger.info(
                "Unhandled webhook event type",
                integration=self.integration,
                event_type=event_type,
            )
            return WebhookResult(success=True, message=f"Event type '{event_type}' not handled")

        logger.info("Dispatching webhook event", integration=self.integration, event_type=event_type)
        result = handler(*args)
        if inspect.isawaitable(result):
            result = await result
        return result
