import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Context, Project, ProjectStatus, Task, TaskStatus, utcnow
from .schemas import (
    ContextCreate,
    ContextUpdate,
    ProjectCreate,
    ProjectUpdate,
    TaskCreate,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTEXTS = [
    {"name": "Work", "color": "#f97316", "icon": "Briefcase"},
    {"name": "Personal", "color": "#22c55e", "icon": "Home"},
    {"name": "Research", "color": "#06b6d4", "icon": "FlaskConical"},
]


async def _next_sort_order(db: AsyncSession, model) -> int:
    res = await db.execute(select(func.max(model.sort_order)).where(model.deleted_at.is_(None)))
    current = res.scalar_one_or_none()
    return 0 if current is None else current + 1


async def _get_live(db: AsyncSession, model, obj_id: str):
    res = await db.execute(select(model).where(model.id == obj_id, model.deleted_at.is_(None)))
    return res.scalar_one_or_none()


def _updates(payload, *required: str) -> dict:
    # explicit nulls are ignored for NOT NULL columns
    updates = payload.model_dump(exclude_unset=True)
    for key in required:
        if key in updates and updates[key] is None:
            del updates[key]
    return updates


async def _soft_delete(db: AsyncSession, obj) -> None:
    now = utcnow()
    obj.deleted_at = now
    obj.updated_at = now
    await db.commit()


# --- contexts ---------------------------------------------------------------


async def create_context(db: AsyncSession, payload: ContextCreate) -> Context:
    data = payload.model_dump()
    if data.get("sort_order") is None:
        data["sort_order"] = await _next_sort_order(db, Context)
    ctx = Context(**data)
    db.add(ctx)
    await db.commit()
    await db.refresh(ctx)
    logger.info("Created context %s (%s)", ctx.id, ctx.name)
    return ctx


async def get_context(db: AsyncSession, context_id: str) -> Context | None:
    return await _get_live(db, Context, context_id)


async def list_contexts(db: AsyncSession) -> list[Context]:
    # sort_order is the tie-break order for quick-entry matching
    stmt = (
        select(Context)
        .where(Context.deleted_at.is_(None))
        .order_by(Context.sort_order, Context.created_at)
    )
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def update_context(db: AsyncSession, context_id: str, payload: ContextUpdate) -> Context | None:
    ctx = await get_context(db, context_id)
    if not ctx:
        return None
    for k, v in _updates(payload, "name", "sort_order").items():
        setattr(ctx, k, v)
    await db.commit()
    await db.refresh(ctx)
    return ctx


async def delete_context(db: AsyncSession, context_id: str) -> bool:
    ctx = await get_context(db, context_id)
    if not ctx:
        return False
    await _soft_delete(db, ctx)
    return True


async def seed_default_contexts(db: AsyncSession) -> int:
    """Insert the default contexts if there are none yet. Returns how many were added."""
    res = await db.execute(select(func.count()).select_from(Context).where(Context.deleted_at.is_(None)))
    if res.scalar_one() > 0:
        return 0
    for order, default in enumerate(DEFAULT_CONTEXTS):
        db.add(Context(sort_order=order, **default))
    await db.commit()
    logger.info("Seeded %d default contexts", len(DEFAULT_CONTEXTS))
    return len(DEFAULT_CONTEXTS)


# --- projects ---------------------------------------------------------------


async def create_project(db: AsyncSession, payload: ProjectCreate) -> Project:
    data = payload.model_dump()
    if data.get("sort_order") is None:
        data["sort_order"] = await _next_sort_order(db, Project)
    data["status"] = ProjectStatus(data["status"])
    project = Project(**data)
    db.add(project)
    await db.commit()
    await db.refresh(project)
    logger.info("Created project %s (%s)", project.id, project.title)
    return project


async def get_project(db: AsyncSession, project_id: str) -> Project | None:
    return await _get_live(db, Project, project_id)


async def list_projects(db: AsyncSession, context_id: str | None = None) -> list[Project]:
    stmt = select(Project).where(Project.deleted_at.is_(None))
    if context_id:
        stmt = stmt.where(Project.context_id == context_id)
    stmt = stmt.order_by(Project.sort_order, Project.created_at)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def update_project(db: AsyncSession, project_id: str, payload: ProjectUpdate) -> Project | None:
    project = await get_project(db, project_id)
    if not project:
        return None
    updates = _updates(payload, "title", "status", "sort_order")
    if updates.get("status") is not None:
        updates["status"] = ProjectStatus(updates["status"])
        if updates["status"] == ProjectStatus.completed and project.status != ProjectStatus.completed:
            project.completed_at = utcnow()
    for k, v in updates.items():
        setattr(project, k, v)
    await db.commit()
    await db.refresh(project)
    return project


async def delete_project(db: AsyncSession, project_id: str) -> bool:
    project = await get_project(db, project_id)
    if not project:
        return False
    await _soft_delete(db, project)
    return True


# --- tasks ------------------------------------------------------------------


async def create_task(db: AsyncSession, payload: TaskCreate) -> Task:
    data = payload.model_dump()
    data["status"] = TaskStatus(data["status"])
    # A task filed under a project lives in that project's context
    if data.get("project_id"):
        project = await get_project(db, data["project_id"])
        if project and project.context_id:
            data["context_id"] = project.context_id
    task = Task(**data)
    db.add(task)
    await db.commit()
    await db.refresh(task)
    logger.info("Created task %s (status=%s)", task.id, task.status.value)
    return task


async def get_task(db: AsyncSession, task_id: str) -> Task | None:
    return await _get_live(db, Task, task_id)


async def list_tasks(
    db: AsyncSession,
    status: str | None = None,
    context_id: str | None = None,
    project_id: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Task]:
    stmt = select(Task).where(Task.deleted_at.is_(None))
    if status:
        stmt = stmt.where(Task.status == TaskStatus(status))
    if context_id:
        stmt = stmt.where(Task.context_id == context_id)
    if project_id:
        stmt = stmt.where(Task.project_id == project_id)
    stmt = stmt.order_by(Task.sort_order, Task.created_at).limit(limit).offset(offset)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def update_task(db: AsyncSession, task_id: str, payload: TaskUpdate) -> Task | None:
    task = await get_task(db, task_id)
    if not task:
        return None
    updates = _updates(payload, "title", "status", "sort_order")
    if updates.get("status") is not None:
        updates["status"] = TaskStatus(updates["status"])
        if updates["status"] == TaskStatus.logbook and task.status != TaskStatus.logbook:
            task.completed_at = utcnow()
    for k, v in updates.items():
        setattr(task, k, v)
    await db.commit()
    await db.refresh(task)
    return task


async def delete_task(db: AsyncSession, task_id: str) -> bool:
    task = await get_task(db, task_id)
    if not task:
        return False
    await _soft_delete(db, task)
    return True


async def references_exist(db: AsyncSession, context_id: str | None = None, project_id: str | None = None) -> bool:
    """True when every given context/project id points at a live row."""
    if context_id and not await get_context(db, context_id):
        return False
    if project_id and not await get_project(db, project_id):
        return False
    return True
