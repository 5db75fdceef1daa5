"""Service layer for task persistence and ownership checks.

Every operation receives the acting :class:`~taskboard.core.security.Identity`
explicitly. Authorization is a single rule: admins may touch any task, everyone
else only the tasks they own.
"""
from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskboard.core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from taskboard.core.security import Identity
from taskboard.models.enums import TaskStatus
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.schemas.task import TaskCreate, TaskStats, TaskUpdate

logger = logging.getLogger(__name__)


def can_access(identity: Identity, task: Task) -> bool:
    return identity.is_admin or task.user_id == identity.id


def _scope(identity: Identity) -> list:
    return [] if identity.is_admin else [Task.user_id == identity.id]


async def create_task(session: AsyncSession, identity: Identity, data: TaskCreate) -> Task:
    # Tokens outlive their user; a deleted account must not gain new tasks.
    if await session.get(User, identity.id) is None:
        logger.warning("Rejected task creation for missing user %s", identity.id)
        raise UnauthorizedError("User no longer exists")

    task = Task(
        title=data.title,
        description=data.description,
        priority=data.priority,
        due_date=data.due_date,
        user_id=identity.id,
    )
    session.add(task)
    await session.flush()
    await session.refresh(task, ["user"])
    logger.info("User %s created task %s", identity.id, task.id)
    return task


async def list_tasks(session: AsyncSession, identity: Identity) -> list[Task]:
    result = await session.execute(
        select(Task)
        .options(selectinload(Task.user))
        .where(*_scope(identity))
        .order_by(Task.created_at.desc())
    )
    return list(result.scalars().all())


async def get_task(session: AsyncSession, identity: Identity, task_id: str) -> Task:
    result = await session.execute(
        select(Task).options(selectinload(Task.user)).where(Task.id == task_id)
    )
    task = result.scalar_one_or_none()
    if not task:
        raise NotFoundError("Task not found")
    if not can_access(identity, task):
        raise ForbiddenError("You can only access your own tasks")
    return task


async def update_task(session: AsyncSession, identity: Identity, task_id: str, data: TaskUpdate) -> Task:
    task = await get_task(session, identity, task_id)
    provided = data.model_fields_set

    if data.title is not None:
        task.title = data.title
    if "description" in provided:
        task.description = data.description
    if data.status is not None:
        task.status = data.status
    if data.priority is not None:
        task.priority = data.priority
    if "due_date" in provided:
        task.due_date = data.due_date

    await session.flush()
    return task


async def delete_task(session: AsyncSession, identity: Identity, task_id: str) -> None:
    task = await get_task(session, identity, task_id)
    await session.delete(task)
    await session.flush()
    logger.info("User %s deleted task %s", identity.id, task_id)


async def get_task_stats(session: AsyncSession, identity: Identity) -> TaskStats:
    scope = _scope(identity)

    async def count(*criteria) -> int:
        result = await session.execute(select(func.count()).select_from(Task).where(*scope, *criteria))
        return result.scalar_one()

    return TaskStats(
        total=await count(),
        pending=await count(Task.status == TaskStatus.PENDING),
        in_progress=await count(Task.status == TaskStatus.IN_PROGRESS),
        completed=await count(Task.status == TaskStatus.COMPLETED),
    )
