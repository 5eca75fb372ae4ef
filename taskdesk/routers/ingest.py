import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..db import get_session
from ..models import TaskStatus
from ..nlp.actions import create_action
from ..nlp.matcher import Entity
from ..nlp.parser import parse_task_input
from ..schemas import IngestOut, ParsedTaskOut, RawTokens, TaskCreate, TaskOut

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_TITLE = 280


def get_now() -> datetime:
    """Reference time for relative dates; overridden in tests."""
    return datetime.now()


class PreviewIn(BaseModel):
    text: str


class IngestIn(BaseModel):
    text: str
    view: str = "inbox"
    selected_project_id: str | None = None
    notes: str | None = None


async def _parse(db: AsyncSession, text: str, now: datetime) -> dict:
    # list order (sort_order) is the tie-break for fuzzy matches
    contexts = [Entity(c.id, c.name) for c in await crud.list_contexts(db)]
    projects = [Entity(p.id, p.title) for p in await crud.list_projects(db)]
    return parse_task_input(text, contexts, projects, now)


def _scheduled_status(when_date: str, today: str) -> str:
    # ISO dates compare correctly as strings
    return TaskStatus.today.value if when_date <= today else TaskStatus.upcoming.value


@router.post("/preview", response_model=ParsedTaskOut, response_model_exclude_none=True)
async def preview(
    payload: PreviewIn,
    db: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
):
    return await _parse(db, payload.text, now)


@router.post("", response_model=IngestOut)
async def ingest(
    payload: IngestIn,
    db: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
):
    parsed = await _parse(db, payload.text, now)
    if not parsed["title"]:
        raise HTTPException(400, "Task title is empty")
    if len(parsed["title"]) > MAX_TITLE:
        raise HTTPException(400, f"Task title is longer than {MAX_TITLE} characters")

    today = now.date().isoformat()
    action = create_action(payload.view, payload.selected_project_id, today)
    if action["type"] == "none":
        # views without their own create action fall back to an inbox task
        action = {"type": "task"}
    if action["type"] != "task":
        raise HTTPException(400, f"View '{payload.view}' does not create tasks")

    fields = dict(action.get("defaults", {}))
    for key in ("context_id", "project_id", "when_date", "deadline"):
        if key in parsed:
            fields[key] = parsed[key]
    if fields.get("when_date"):
        fields["status"] = _scheduled_status(fields["when_date"], today)
    elif fields.get("status") == TaskStatus.upcoming.value:
        # upcoming needs a date
        fields["status"] = TaskStatus.anytime.value

    if not await crud.references_exist(db, fields.get("context_id"), fields.get("project_id")):
        raise HTTPException(400, "Unknown context or project")

    task = await crud.create_task(db, TaskCreate(title=parsed["title"], notes=payload.notes, **fields))
    unresolved = {k: v for k, v in parsed["raw"].items() if k not in parsed and f"{k}_id" not in parsed}
    if unresolved:
        logger.info("Task %s created with unrecognized tokens: %s", task.id, unresolved)
    return IngestOut(task=TaskOut.model_validate(task), raw=RawTokens(**parsed["raw"]))
