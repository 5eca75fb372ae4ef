from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..db import get_session
from ..schemas import ContextCreate, ContextOut, ContextUpdate

router = APIRouter()


@router.post("", response_model=ContextOut)
async def create_context(payload: ContextCreate, db: AsyncSession = Depends(get_session)):
    return await crud.create_context(db, payload)


@router.get("", response_model=list[ContextOut])
async def list_contexts(db: AsyncSession = Depends(get_session)):
    return await crud.list_contexts(db)


@router.get("/{context_id}", response_model=ContextOut)
async def get_context(context_id: str, db: AsyncSession = Depends(get_session)):
    ctx = await crud.get_context(db, context_id)
    if not ctx:
        raise HTTPException(404, "Context not found")
    return ctx


@router.patch("/{context_id}", response_model=ContextOut)
async def update_context(context_id: str, payload: ContextUpdate, db: AsyncSession = Depends(get_session)):
    ctx = await crud.update_context(db, context_id, payload)
    if not ctx:
        raise HTTPException(404, "Context not found")
    return ctx


@router.delete("/{context_id}")
async def delete_context(context_id: str, db: AsyncSession = Depends(get_session)):
    ok = await crud.delete_context(db, context_id)
    if not ok:
        raise HTTPException(404, "Context not found")
    return {"deleted": True}
