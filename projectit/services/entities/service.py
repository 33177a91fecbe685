"""
Generic CRUD over the JSON-document entity table.

Filters use a Mongo-style criteria dict, the same shape the web client sends:
plain values mean equality, ``None`` means missing/null, and nested dicts carry
operators (``$ne``, ``$in``, ``$nin``, ``$gt``, ``$gte``, ``$lt``, ``$lte``,
``$exists``, ``$regex``). Matching happens in memory after loading the rows of
one entity type.
"""
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

import structlog
from sqlalchemy.orm import Session

from projectit.core.exceptions import EntityNotFoundError, InvalidEntityTypeError, ProjectITError
from projectit.models.entity import CASCADE_MAP, ENTITY_TYPES, META_FIELDS, EntityRecord

logger = structlog.get_logger(__name__)

DEFAULT_SORT = "-created_date"


def validate_entity_type(entity_type: str) -> None:
    if entity_type not in ENTITY_TYPES:
        raise InvalidEntityTypeError(entity_type)


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _compare(stored: Any, expected: Any, op: Callable[[Any, Any], bool]) -> bool:
    """Numeric comparison when both sides parse as numbers, string comparison otherwise."""
    if stored is None:
        return False
    left, right = _as_number(stored), _as_number(expected)
    if left is not None and right is not None:
        return op(left, right)
    return op(str(stored), str(expected))


def _equals(stored: Any, expected: Any) -> bool:
    if stored is None:
        return False
    if isinstance(expected, bool) or isinstance(stored, bool):
        return stored == expected
    return str(stored) == str(expected)


def _operand_list(op: str, value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, dict):
        raise ProjectITError(f"Filter operator {op} expects a list", status_code=400)
    return [value]


def _regex(pattern: Any) -> re.Pattern:
    try:
        return re.compile(str(pattern), re.IGNORECASE)
    except re.error as e:
        raise ProjectITError(f"Invalid $regex pattern: {e}", status_code=400) from e


def _match_operator(record: Dict[str, Any], field: str, op: str, expected: Any) -> bool:
    stored = record.get(field)

    if op == "$ne":
        return stored is None or not _equals(stored, expected)
    if op == "$in":
        return stored is not None and any(_equals(stored, item) for item in _operand_list(op, expected))
    if op == "$nin":
        return stored is None or not any(_equals(stored, item) for item in _operand_list(op, expected))
    if op == "$gt":
        return _compare(stored, expected, lambda a, b: a > b)
    if op == "$gte":
        return _compare(stored, expected, lambda a, b: a >= b)
    if op == "$lt":
        return _compare(stored, expected, lambda a, b: a < b)
    if op == "$lte":
        return _compare(stored, expected, lambda a, b: a <= b)
    if op == "$exists":
        return (field in record) == bool(expected)
    if op == "$regex":
        return stored is not None and _regex(expected).search(str(stored)) is not None

    logger.warning("Ignoring unsupported filter operator", operator=op, field=field)
    return True


def matches(record: Dict[str, Any], criteria: Dict[str, Any]) -> bool:
    """Check a flattened record against filter criteria."""
    for field, expected in criteria.items():
        if isinstance(expected, dict):
            for op, op_value in expected.items():
                if not _match_operator(record, field, op, op_value):
                    return False
        elif expected is None:
            if record.get(field) is not None:
                return False
        elif not _equals(record.get(field), expected):
            return False
    return True


def _sort_key(value: Any) -> tuple:
    if value is None:
        return (2, 0.0, "")
    number = _as_number(value)
    if number is not None and not isinstance(value, str):
        return (0, number, "")
    return (1, 0.0, str(value))


def sort_records(records: List[Dict[str, Any]], sort: Optional[str]) -> List[Dict[str, Any]]:
    """Sort by ``field`` ascending or ``-field`` descending."""
    sort = sort or DEFAULT_SORT
    descending = sort.startswith("-")
    field = sort[1:] if descending else sort
    return sorted(records, key=lambda r: _sort_key(r.get(field)), reverse=descending)


class EntityService:
    """CRUD operations for any whitelisted entity type."""

    def __init__(self, db: Session):
        self.db = db

    def _rows(self, entity_type: str) -> List[EntityRecord]:
        return self.db.query(EntityRecord).filter(EntityRecord.entity_type == entity_type).all()

    def _row(self, entity_type: str, entity_id: str) -> EntityRecord:
        row = self.db.query(EntityRecord).filter(
            EntityRecord.entity_type == entity_type,
            EntityRecord.id == str(entity_id),
        ).first()
        if row is None:
            raise EntityNotFoundError(entity_type, str(entity_id))
        return row

    @staticmethod
    def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in (data or {}).items() if k not in META_FIELDS}

    def list(
        self,
        entity_type: str,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """List all records of a type."""
        return self.filter(entity_type, {}, sort=sort, limit=limit)

    def filter(
        self,
        entity_type: str,
        criteria: Optional[Dict[str, Any]] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Records of a type matching ``criteria``."""
        validate_entity_type(entity_type)
        criteria = criteria or {}
        records = [row.to_dict() for row in self._rows(entity_type)]
        records = [r for r in records if matches(r, criteria)]
        records = sort_records(records, sort)
        if limit:
            records = records[:int(limit)]
        return records

    def get(self, entity_type: str, entity_id: str) -> Dict[str, Any]:
        validate_entity_type(entity_type)
        return self._row(entity_type, entity_id).to_dict()

    def create(
        self,
        entity_type: str,
        data: Dict[str, Any],
        created_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Insert a record and return it in API shape."""
        validate_entity_type(entity_type)
        row = EntityRecord(entity_type=entity_type, data=self._clean(data), created_by=created_by)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row.to_dict()

    def bulk_create(
        self,
        entity_type: str,
        items: Iterable[Dict[str, Any]],
        created_by: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Insert several records in one transaction."""
        validate_entity_type(entity_type)
        rows = [
            EntityRecord(entity_type=entity_type, data=self._clean(item), created_by=created_by)
            for item in items
        ]
        try:
            self.db.add_all(rows)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        for row in rows:
            self.db.refresh(row)
        return [row.to_dict() for row in rows]

    def update(self, entity_type: str, entity_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """Shallow-merge ``patch`` into the stored document."""
        validate_entity_type(entity_type)
        row = self._row(entity_type, entity_id)
        # Reassign so the JSON column is flagged dirty
        row.data = {**(row.data or {}), **self._clean(patch)}
        row.updated_date = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(row)
        return row.to_dict()

    def delete(
        self,
        entity_type: str,
        entity_id: str,
        deleted_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Delete a record and its children, leaving an audit entry."""
        validate_entity_type(entity_type)
        row = self._row(entity_type, entity_id)
        cascaded: List[Dict[str, Any]] = []

        try:
            for child_type, foreign_key in CASCADE_MAP.get(entity_type, []):
                children = [
                    child for child in self._rows(child_type)
                    if _equals((child.data or {}).get(foreign_key), row.id)
                ]
                if not children:
                    continue

                for child in children:
                    for sub_type, sub_key in CASCADE_MAP.get(child_type, []):
                        grandchildren = [
                            g for g in self._rows(sub_type)
                            if _equals((g.data or {}).get(sub_key), child.id)
                        ]
                        for grandchild in grandchildren:
                            self.db.delete(grandchild)
                        if grandchildren:
                            cascaded.append({"entity": sub_type, "count": len(grandchildren)})
                    self.db.delete(child)

                cascaded.append({"entity": child_type, "count": len(children)})

            deleted_data = dict(row.data or {})
            self.db.delete(row)

            self.db.add(EntityRecord(
                entity_type="AuditLog",
                data={
                    "action": "delete",
                    "entity_type": entity_type,
                    "entity_id": entity_id,
                    "deleted_data": {**deleted_data, "_cascaded": cascaded},
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
                created_by=deleted_by or "system",
            ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Deleted entity",
            entity_type=entity_type,
            entity_id=entity_id,
            cascaded=cascaded,
        )
        return {"success": True, "cascaded": cascaded}
