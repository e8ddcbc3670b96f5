"""
api/routes/programs.py
----------------------
Program generation and concierge edit endpoints.

Flow:
  1. POST /v1/programs/generate?user_id=...   → Program JSON (stored in memory)
  2. GET  /v1/programs/{id}                   → current state
  3. PUT/POST edit endpoints                  → updated Program JSON
  4. POST /v1/programs/{id}/validate          → draft → validated

Engine errors (NO_ALTERNATIVES, NO_VENUES, NOT_FOUND, ...) are raised as
ConciergeError and turned into ``{"error": {...}}`` by api.server.

In-memory program store: persistence of programs belongs to the caller.
"""

from __future__ import annotations

import random
from dataclasses import asdict, dataclass

from fastapi import APIRouter, Depends, Query

from modules.catalog import get_catalog
from modules.editing import ProgramEditor
from modules.errors import NotFoundError
from modules.exclusions import get_exclusion_store
from modules.observability import AuditLogger
from modules.planning import ProgramGenerator, program_stats
from schemas.itinerary import Program
from schemas.requests import (
    ExcludeVenueRequest,
    GenerateProgramRequest,
    SelectOptionsRequest,
    SwitchTypeRequest,
    UpdateDayTitleRequest,
    UpdateNotesRequest,
    UpdateTimeRequest,
    UpdateTitleRequest,
)

router = APIRouter()

# ── In-memory program store ────────────────────────────────────────────────────
# key: program_id, value: Program
_store: dict[str, Program] = {}


# ── Engine wiring ──────────────────────────────────────────────────────────────

@dataclass
class Engine:
    generator: ProgramGenerator
    editor: ProgramEditor


_engine: Engine | None = None


def get_engine() -> Engine:
    """Process-wide generator/editor pair sharing catalog, RNG, exclusions and audit."""
    global _engine
    if _engine is None:
        catalog = get_catalog()
        rng = random.Random()
        store = get_exclusion_store()
        audit = AuditLogger()
        _engine = Engine(
            generator=ProgramGenerator(catalog=catalog, rng=rng, exclusion_store=store, audit=audit),
            editor=ProgramEditor(catalog=catalog, rng=rng, exclusion_store=store, audit=audit),
        )
    return _engine


def get_program(program_id: str) -> Program:
    """Retrieve a stored program or raise NOT_FOUND."""
    program = _store.get(program_id)
    if program is None:
        raise NotFoundError(f"Program '{program_id}' not found. Call /v1/programs/generate first.")
    return program


# ── Serialisers ────────────────────────────────────────────────────────────────

def _ser_program(program: Program) -> dict:
    data = asdict(program)
    for day, raw_day in zip(program.days, data["days"]):
        for slot, raw_slot in zip(day.activities, raw_day["activities"]):
            raw_slot["needs_attention"] = slot.needs_attention
            raw_slot["effective_time"] = slot.effective_time
    return {"program": data, "stats": asdict(program_stats(program))}


# ── Generation ─────────────────────────────────────────────────────────────────

@router.post("/generate", summary="Generate a day-by-day program")
def generate_program(
    req: GenerateProgramRequest,
    user_id: str = Query("user_001", min_length=1, description="Client identifier"),
    engine: Engine = Depends(get_engine),
) -> dict:
    program = engine.generator.generate(user_id, req)
    _store[program.id] = program
    return _ser_program(program)


@router.get("/{program_id}", summary="Fetch a program")
def read_program(program_id: str) -> dict:
    return _ser_program(get_program(program_id))


@router.get("/{program_id}/stats", summary="Program counters")
def read_stats(program_id: str) -> dict:
    return asdict(program_stats(get_program(program_id)))


# ── Option edits ───────────────────────────────────────────────────────────────

@router.put("/{program_id}/options/{option_id}/select", summary="Select one option")
def select_option(program_id: str, option_id: str, engine: Engine = Depends(get_engine)) -> dict:
    program = get_program(program_id)
    engine.editor.select_option(program, option_id)
    return _ser_program(program)


@router.put("/{program_id}/activities/{group_id}/select", summary="Select several options (shopping)")
def select_multiple(
    program_id: str,
    group_id: str,
    req: SelectOptionsRequest,
    engine: Engine = Depends(get_engine),
) -> dict:
    program = get_program(program_id)
    _, slot = engine.editor.find_slot(program, group_id)
    foreign = [oid for oid in req.option_ids if oid not in {o.id for o in slot.options}]
    if foreign:
        raise NotFoundError(f"Options {foreign} are not part of activity '{group_id}'")
    engine.editor.select_multiple(program, req.option_ids)
    return _ser_program(program)


@router.post("/{program_id}/options/{option_id}/regenerate", summary="Replace an option's venue")
def regenerate_option(program_id: str, option_id: str, engine: Engine = Depends(get_engine)) -> dict:
    program = get_program(program_id)
    venue = engine.editor.regenerate_option(program, option_id)
    return {"venue": asdict(venue), **_ser_program(program)}


# ── Slot edits ─────────────────────────────────────────────────────────────────

@router.put("/{program_id}/activities/{group_id}/switch-type", summary="Switch an activity's category")
def switch_activity_type(
    program_id: str,
    group_id: str,
    req: SwitchTypeRequest,
    engine: Engine = Depends(get_engine),
) -> dict:
    program = get_program(program_id)
    engine.editor.switch_activity_type(program, group_id, req.category, req.day_date, req.slot_time)
    return _ser_program(program)


@router.put("/{program_id}/activities/{group_id}/rest", summary="Toggle free time")
def toggle_rest(program_id: str, group_id: str, engine: Engine = Depends(get_engine)) -> dict:
    program = get_program(program_id)
    engine.editor.toggle_rest(program, group_id)
    return _ser_program(program)


@router.put("/{program_id}/activities/{group_id}/time", summary="Set an activity's time")
def update_time(
    program_id: str,
    group_id: str,
    req: UpdateTimeRequest,
    engine: Engine = Depends(get_engine),
) -> dict:
    program = get_program(program_id)
    engine.editor.update_time(program, group_id, req.time)
    return _ser_program(program)


@router.put("/{program_id}/activities/{group_id}/notes", summary="Set concierge notes")
def update_notes(
    program_id: str,
    group_id: str,
    req: UpdateNotesRequest,
    engine: Engine = Depends(get_engine),
) -> dict:
    program = get_program(program_id)
    engine.editor.update_notes(program, group_id, req.notes)
    return _ser_program(program)


# ── Program edits ──────────────────────────────────────────────────────────────

@router.put("/{program_id}/title", summary="Rename the program")
def update_title(program_id: str, req: UpdateTitleRequest, engine: Engine = Depends(get_engine)) -> dict:
    program = get_program(program_id)
    engine.editor.update_program_title(program, req.title)
    return _ser_program(program)


@router.put("/{program_id}/days/{day_number}/title", summary="Rename a day")
def update_day_title(
    program_id: str,
    day_number: int,
    req: UpdateDayTitleRequest,
    engine: Engine = Depends(get_engine),
) -> dict:
    program = get_program(program_id)
    engine.editor.update_day_title(program, day_number, req.theme_client, req.theme_internal)
    return _ser_program(program)


@router.post("/{program_id}/validate", summary="Validate the program")
def validate_program(program_id: str, engine: Engine = Depends(get_engine)) -> dict:
    program = get_program(program_id)
    engine.editor.validate_program(program)
    return _ser_program(program)


@router.post("/{program_id}/exclude", summary="Exclude a venue for this client")
def exclude_venue(program_id: str, req: ExcludeVenueRequest, engine: Engine = Depends(get_engine)) -> dict:
    program = get_program(program_id)
    record = engine.editor.exclude_venue(program.user_id, req.venue_name, req.category, req.reason)
    return {"exclusion": asdict(record)}
