from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..db import get_session
from ..schemas import ProjectCreate, ProjectOut, ProjectUpdate

router = APIRouter()


@router.post("", response_model=ProjectOut)
async def create_project(payload: ProjectCreate, db: AsyncSession = Depends(get_session)):
    if not await crud.references_exist(db, context_id=payload.context_id):
        raise HTTPException(400, "Unknown context")
    return await crud.create_project(db, payload)


@router.get("", response_model=list[ProjectOut])
async def list_projects(
    context_id: str | None = Query(None, description="Only projects in this context"),
    db: AsyncSession = Depends(get_session),
):
    return await crud.list_projects(db, context_id=context_id)


@router.get("/{project_id}", response_model=ProjectOut)
async def get_project(project_id: str, db: AsyncSession = Depends(get_session)):
    project = await crud.get_project(db, project_id)
    if not project:
        raise HTTPException(404, "Project not found")
    return project


@router.patch("/{project_id}", response_model=ProjectOut)
async def update_project(project_id: str, payload: ProjectUpdate, db: AsyncSession = Depends(get_session)):
    if not await crud.references_exist(db, context_id=payload.context_id):
        raise HTTPException(400, "Unknown context")
    project = await crud.update_project(db, project_id, payload)
    if not project:
        raise HTTPException(404, "Project not found")
    return project


@router.delete("/{project_id}")
async def delete_project(project_id: str, db: AsyncSession = Depends(get_session)):
    ok = await crud.delete_project(db, project_id)
    if not ok:
        raise HTTPException(404, "Project not found")
    return {"deleted": True}
