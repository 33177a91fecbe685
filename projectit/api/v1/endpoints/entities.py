"""
Generic entity CRUD endpoints.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from projectit.core.database import get_db
from projectit.schemas.entity import EntityFilterRequest
from projectit.services.entities import EntityService

router = APIRouter()


@router.get("/{entity_type}/list")
async def list_entities(
    entity_type: str,
    sort: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """List records of one entity type."""
    return EntityService(db).list(entity_type, sort=sort, limit=limit)


@router.post("/{entity_type}/filter")
async def filter_entities(
    entity_type: str,
    request: EntityFilterRequest,
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return EntityService(db).filter(entity_type, request.filter, sort=request.sort, limit=request.limit)


@router.post("/{entity_type}/create", status_code=status.HTTP_201_CREATED)
async def create_entity(
    entity_type: str,
    data: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    return EntityService(db).create(entity_type, data)


@router.post("/{entity_type}/bulk-create", status_code=status.HTTP_201_CREATED)
async def bulk_create_entities(
    entity_type: str,
    items: List[Dict[str, Any]] = Body(...),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    return EntityService(db).bulk_create(entity_type, items)


@router.put("/{entity_type}/{entity_id}")
async def update_entity(
    entity_type: str,
    entity_id: str,
    patch: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Shallow-merge the body into the stored record."""
    return EntityService(db).update(entity_type, entity_id, patch)


@router.delete("/{entity_type}/{entity_id}")
async def delete_entity(
    entity_type: str,
    entity_id: str,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Delete a record and cascade to its children."""
    return EntityService(db).delete(entity_type, entity_id)
