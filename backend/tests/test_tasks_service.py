from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from taskboard.core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from taskboard.core.security import Identity
from taskboard.models import Task, TaskPriority, TaskStatus, UserRole
from taskboard.schemas.task import TaskCreate, TaskUpdate
from taskboard.schemas.user import UserCreate
from taskboard.services import tasks as task_service
from taskboard.services import users as user_service


async def _identity(session, email: str, role: UserRole = UserRole.USER) -> Identity:
    user = await user_service.create_user(
        session, UserCreate(email=email, name=email.split("@")[0], password="password123", role=role)
    )
    return Identity(id=user.id, email=user.email, role=user.role)


@pytest.fixture
def people(session):
    async def _people() -> tuple[Identity, Identity, Identity]:
        admin = await _identity(session, "admin@example.com", UserRole.ADMIN)
        alice = await _identity(session, "alice@example.com")
        bob = await _identity(session, "bob@example.com")
        return admin, alice, bob

    return _people


@pytest.mark.asyncio
async def test_create_task_sets_owner_and_defaults(session, people):
    _, alice, _ = await people()

    task = await task_service.create_task(session, alice, TaskCreate(title="Write report"))

    assert task.user_id == alice.id
    assert task.user.email == "alice@example.com"
    assert task.status is TaskStatus.PENDING
    assert task.priority is TaskPriority.MEDIUM
    assert task.due_date is None


@pytest.mark.asyncio
async def test_create_task_ignores_client_owner_field(session, people):
    _, alice, bob = await people()

    payload = TaskCreate.model_validate({"title": "Sneaky", "user_id": bob.id, "userId": bob.id})
    task = await task_service.create_task(session, alice, payload)

    assert task.user_id == alice.id


@pytest.mark.asyncio
async def test_ownership_rule(session, people):
    admin, alice, bob = await people()
    task = await task_service.create_task(session, alice, TaskCreate(title="Alice's"))

    assert task_service.can_access(alice, task)
    assert task_service.can_access(admin, task)
    assert not task_service.can_access(bob, task)

    assert (await task_service.get_task(session, alice, task.id)).id == task.id
    assert (await task_service.get_task(session, admin, task.id)).id == task.id
    with pytest.raises(ForbiddenError, match="own tasks"):
        await task_service.get_task(session, bob, task.id)


@pytest.mark.asyncio
async def test_missing_task_is_not_found_for_everyone(session, people):
    admin, alice, _ = await people()

    for identity in (admin, alice):
        with pytest.raises(NotFoundError):
            await task_service.get_task(session, identity, "no-such-task")


@pytest.mark.asyncio
async def test_list_scopes_by_role_and_orders_newest_first(session, people):
    admin, alice, bob = await people()
    first = await task_service.create_task(session, alice, TaskCreate(title="first"))
    second = await task_service.create_task(session, bob, TaskCreate(title="second"))
    third = await task_service.create_task(session, alice, TaskCreate(title="third"))

    assert [t.id for t in await task_service.list_tasks(session, alice)] == [third.id, first.id]
    assert [t.id for t in await task_service.list_tasks(session, bob)] == [second.id]

    everything = await task_service.list_tasks(session, admin)
    assert [t.id for t in everything] == [third.id, second.id, first.id]
    assert {t.user.email for t in everything} == {"alice@example.com", "bob@example.com"}


@pytest.mark.asyncio
async def test_update_merges_only_provided_fields(session, people):
    _, alice, _ = await people()
    task = await task_service.create_task(
        session,
        alice,
        TaskCreate(title="Plan trip", description="Beach", priority=TaskPriority.LOW, due_date=date(2025, 11, 5)),
    )

    updated = await task_service.update_task(
        session, alice, task.id, TaskUpdate(status=TaskStatus.IN_PROGRESS)
    )

    assert updated.status is TaskStatus.IN_PROGRESS
    assert updated.title == "Plan trip"
    assert updated.description == "Beach"
    assert updated.priority is TaskPriority.LOW
    assert updated.due_date == date(2025, 11, 5)


@pytest.mark.asyncio
async def test_update_due_date_parses_and_clears(session, people):
    _, alice, _ = await people()
    task = await task_service.create_task(session, alice, TaskCreate(title="Dated"))

    updated = await task_service.update_task(
        session, alice, task.id, TaskUpdate.model_validate({"due_date": "2025-12-01"})
    )
    assert updated.due_date == date(2025, 12, 1)

    updated = await task_service.update_task(session, alice, task.id, TaskUpdate.model_validate({"due_date": None}))
    assert updated.due_date is None

    await task_service.update_task(session, alice, task.id, TaskUpdate.model_validate({"due_date": "2025-12-02"}))
    updated = await task_service.update_task(session, alice, task.id, TaskUpdate.model_validate({"due_date": ""}))
    assert updated.due_date is None


@pytest.mark.asyncio
async def test_update_and_delete_require_ownership(session, people):
    admin, alice, bob = await people()
    task = await task_service.create_task(session, alice, TaskCreate(title="Alice's"))

    with pytest.raises(ForbiddenError):
        await task_service.update_task(session, bob, task.id, TaskUpdate(title="Hijacked"))
    with pytest.raises(ForbiddenError):
        await task_service.delete_task(session, bob, task.id)

    updated = await task_service.update_task(session, admin, task.id, TaskUpdate(title="Reviewed"))
    assert updated.title == "Reviewed"
    assert updated.user_id == alice.id

    await task_service.delete_task(session, admin, task.id)
    with pytest.raises(NotFoundError):
        await task_service.get_task(session, alice, task.id)


@pytest.mark.asyncio
async def test_stats_partition_own_tasks(session, people):
    admin, alice, bob = await people()
    statuses = [TaskStatus.PENDING, TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]
    for index, status in enumerate(statuses):
        task = await task_service.create_task(session, alice, TaskCreate(title=f"task {index}"))
        if status is not TaskStatus.PENDING:
            await task_service.update_task(session, alice, task.id, TaskUpdate(status=status))
    await task_service.create_task(session, bob, TaskCreate(title="bob's"))

    stats = await task_service.get_task_stats(session, alice)
    assert stats.model_dump() == {"total": 4, "pending": 2, "in_progress": 1, "completed": 1}
    assert stats.pending + stats.in_progress + stats.completed == stats.total

    bob_stats = await task_service.get_task_stats(session, bob)
    assert bob_stats.model_dump() == {"total": 1, "pending": 1, "in_progress": 0, "completed": 0}

    admin_stats = await task_service.get_task_stats(session, admin)
    assert admin_stats.model_dump() == {"total": 5, "pending": 3, "in_progress": 1, "completed": 1}


@pytest.mark.asyncio
async def test_create_task_for_deleted_user_is_rejected(session, people):
    _, alice, _ = await people()
    await user_service.delete_user(session, alice.id)

    with pytest.raises(UnauthorizedError):
        await task_service.create_task(session, alice, TaskCreate(title="Orphan"))

    assert (await session.execute(select(func.count()).select_from(Task))).scalar_one() == 0


@pytest.mark.asyncio
async def test_sqlite_enforces_task_owner_foreign_key(session):
    session.add(Task(title="Nobody's", user_id="no-such-user"))

    with pytest.raises(IntegrityError):
        await session.flush()
    await session.rollback()
