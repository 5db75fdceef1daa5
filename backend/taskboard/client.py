"""Async HTTP client for the Taskboard API."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from taskboard.schemas.auth import LoginResponse
from taskboard.schemas.task import TaskCreate, TaskRead, TaskStats, TaskUpdate
from taskboard.schemas.user import ProfileUpdate, UserCreate, UserRead, UserUpdate

logger = logging.getLogger(__name__)


class ApiClientError(RuntimeError):
    """Raised when an API call fails. ``status_code`` is 0 for transport failures."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401


class TaskboardClient:
    """Thin wrapper over the REST surface that keeps the access token between calls.

    ``transport`` may be any httpx transport, e.g. ``httpx.ASGITransport`` to
    talk to an in-process application.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        token: str | None = None,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self.token = token

    async def __aenter__(self) -> TaskboardClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    async def _request(self, method: str, path: str, json: Any = None, auth: bool = True) -> Any:
        headers = {}
        if auth:
            if not self.token:
                raise ApiClientError(401, "No access token; log in first")
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = await self._http.request(method, path, json=json, headers=headers)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiClientError(0, f"Could not reach server: {exc}") from exc

        if response.status_code >= 400:
            raise ApiClientError(response.status_code, _error_detail(response))
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Auth

    async def login(self, email: str, password: str) -> LoginResponse:
        data = await self._request("POST", "/auth/login", {"email": email, "password": password}, auth=False)
        result = LoginResponse.model_validate(data)
        self.token = result.access_token
        return result

    async def register(self, user: UserCreate) -> UserRead:
        data = await self._request("POST", "/auth/register", user.model_dump(mode="json"), auth=False)
        return UserRead.model_validate(data)

    def logout(self) -> None:
        self.token = None

    # Users

    async def get_profile(self) -> UserRead:
        return UserRead.model_validate(await self._request("GET", "/users/profile"))

    async def update_profile(self, changes: ProfileUpdate) -> UserRead:
        data = await self._request("PATCH", "/users/profile", changes.model_dump(mode="json", exclude_unset=True))
        return UserRead.model_validate(data)

    async def list_users(self) -> list[UserRead]:
        return [UserRead.model_validate(item) for item in await self._request("GET", "/users")]

    async def get_user(self, user_id: str) -> UserRead:
        return UserRead.model_validate(await self._request("GET", f"/users/{user_id}"))

    async def update_user(self, user_id: str, changes: UserUpdate) -> UserRead:
        data = await self._request("PATCH", f"/users/{user_id}", changes.model_dump(mode="json", exclude_unset=True))
        return UserRead.model_validate(data)

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}")

    # Tasks

    async def list_tasks(self) -> list[TaskRead]:
        return [TaskRead.model_validate(item) for item in await self._request("GET", "/tasks")]

    async def get_task(self, task_id: str) -> TaskRead:
        return TaskRead.model_validate(await self._request("GET", f"/tasks/{task_id}"))

    async def create_task(self, task: TaskCreate) -> TaskRead:
        data = await self._request("POST", "/tasks", task.model_dump(mode="json"))
        return TaskRead.model_validate(data)

    async def update_task(self, task_id: str, changes: TaskUpdate) -> TaskRead:
        data = await self._request("PATCH", f"/tasks/{task_id}", changes.model_dump(mode="json", exclude_unset=True))
        return TaskRead.model_validate(data)

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def get_task_stats(self) -> TaskStats:
        return TaskStats.model_validate(await self._request("GET", "/tasks/stats"))


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else None
    return str(detail) if detail is not None else response.reason_phrase
