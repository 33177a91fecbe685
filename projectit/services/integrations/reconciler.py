"""
Sparse diffing of externally reported fields against a local record.
"""
from typing import Any, Dict, Mapping, Optional

import structlog

logger = structlog.get_logger(__name__)


class FieldReconciler:
    """Compute the fields whose external value differs from the local one.

    ``field_map`` maps external field names to local field names for plain
    copies. ``status_map`` translates external status codes to local status
    values; codes missing from the table are ignored. Lookups use the code's
    string form so ``9`` and ``"9"`` agree.
    """

    def __init__(
        self,
        field_map: Mapping[str, str],
        status_field: Optional[str] = None,
        status_map: Optional[Mapping[Any, str]] = None,
        local_status_field: str = "status",
    ):
        self.field_map = dict(field_map)
        self.status_field = status_field
        self.status_map = {str(code): value for code, value in (status_map or {}).items()}
        self.local_status_field = local_status_field

    def map_status(self, code: Any) -> Optional[str]:
        """Local status for an external code, or None when unmapped."""
        if code is None:
            return None
        return self.status_map.get(str(code))

    def diff(self, local: Mapping[str, Any], external: Mapping[str, Any]) -> Dict[str, Any]:
        """Return the staged updates; an empty dict means nothing changed."""
        updates: Dict[str, Any] = {}

        for external_field, local_field in self.field_map.items():
            value = external.get(external_field)
            if value and value != local.get(local_field):
                updates[local_field] = value

        if self.status_field:
            code = external.get(self.status_field)
            status = self.map_status(code)
            if status is None:
                if code is not None:
                    logger.debug("Ignoring unmapped external status", status_code=code)
            elif status != local.get(self.local_status_field):
                updates[self.local_status_field] = status

        return updates

    def status_diff(self, local: Mapping[str, Any], status: str) -> Dict[str, Any]:
        """Stage a fixed local status when it differs from the current one."""
        if status != local.get(self.local_status_field):
            return {self.local_status_field: status}
        return {}
