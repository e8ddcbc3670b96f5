"""
api/routes/exclusions.py
------------------------
Read and lift a client's permanent venue exclusions.

Exclusions are added through POST /v1/programs/{id}/exclude.
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from api.routes.programs import Engine, get_engine
from modules.errors import NotFoundError
from schemas.venue import VenueCategory

router = APIRouter()


@router.get("/{user_id}", summary="List a client's excluded venues")
def list_exclusions(user_id: str, engine: Engine = Depends(get_engine)) -> dict:
    records = engine.editor.exclusions.list_for(user_id)
    return {"user_id": user_id, "exclusions": [asdict(r) for r in records]}


@router.delete("/{user_id}", summary="Lift one exclusion")
def delete_exclusion(
    user_id: str,
    venue_name: str = Query(..., min_length=1),
    category: VenueCategory = Query(...),
    engine: Engine = Depends(get_engine),
) -> dict:
    if not engine.editor.exclusions.remove(user_id, venue_name, category.value):
        raise NotFoundError(f"'{venue_name}' ({category.value}) is not excluded for {user_id}")
    return {"deleted": True}
