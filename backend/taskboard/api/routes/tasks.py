"""Task endpoints. Any authenticated identity may call them; ownership is enforced by the service."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.dependencies import get_current_identity, get_db
from taskboard.core.security import Identity
from taskboard.schemas.task import TaskCreate, TaskRead, TaskStats, TaskUpdate
from taskboard.services import tasks as task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreate,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> TaskRead:
    task = await task_service.create_task(session, identity, payload)
    await session.commit()
    return TaskRead.model_validate(task)


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> list[TaskRead]:
    tasks = await task_service.list_tasks(session, identity)
    return [TaskRead.model_validate(task) for task in tasks]


@router.get("/stats", response_model=TaskStats)
async def get_task_stats(
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> TaskStats:
    return await task_service.get_task_stats(session, identity)


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: str,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> TaskRead:
    task = await task_service.get_task(session, identity, task_id)
    return TaskRead.model_validate(task)


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> TaskRead:
    task = await task_service.update_task(session, identity, task_id, payload)
    await session.commit()
    return TaskRead.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_task(
    task_id: str,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> Response:
    await task_service.delete_task(session, identity, task_id)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
