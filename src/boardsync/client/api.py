"""HTTP client for the board REST API.

Responses are parsed into the same pydantic schemas the server renders, so
board state on the client side works with ``TaskRead``/``ProjectRead``
objects rather than raw dicts.
"""

from typing import Any
from uuid import UUID

import httpx
from pydantic_core import to_jsonable_python

from src.boardsync.core.logging import get_logger
from src.boardsync.schemas.comment import CommentRead
from src.boardsync.schemas.project import ProjectRead, ProjectWithTasks
from src.boardsync.schemas.task import TaskRead

logger = get_logger(__name__)


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, detail: Any = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class Unauthenticated(ApiError):
    """The stored credential was rejected. It has already been cleared."""


class Forbidden(ApiError):
    pass


class CredentialStore:
    """Holds the access token for the signed-in user."""

    def __init__(self, token: str | None = None):
        self._token = token

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class BoardApiClient:
    """One coroutine per REST operation.

    Args:
        base_url: Server root, e.g. ``http://localhost:5000``.
        credentials: Token store shared with the realtime connection.
        transport: Optional httpx transport (``ASGITransport`` in tests).
    """

    def __init__(
        self,
        base_url: str,
        credentials: CredentialStore,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
        auth_header_name: str = "x-auth-token",
    ):
        self.credentials = credentials
        self.auth_header_name = auth_header_name
        self._http = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/api",
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "BoardApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        headers = {}
        if self.credentials.token:
            headers[self.auth_header_name] = self.credentials.token
        response = await self._http.request(
            method,
            path,
            json=None if json is None else to_jsonable_python(json),
            headers=headers,
        )

        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = response.text
        detail = body.get("detail") if isinstance(body, dict) else body
        if response.status_code == 401:
            self.credentials.clear()
            logger.info("Credential rejected, signed out", path=path)
            raise Unauthenticated(response.status_code, detail)
        if response.status_code == 403:
            raise Forbidden(response.status_code, detail)
        raise ApiError(response.status_code, detail)

    # Auth

    async def sync_user(
        self, provider_id: str, email: str, name: str, avatar: str | None = None
    ) -> dict[str, Any]:
        """Exchange a provider profile for an access token and store it."""
        body = {"clerkId": provider_id, "email": email, "name": name, "avatar": avatar}
        data = await self._request("POST", "/auth/sync", body)
        self.credentials.set(data["token"])
        return data["user"]

    # Projects

    async def list_projects(self) -> list[ProjectWithTasks]:
        data = await self._request("GET", "/projects")
        return [ProjectWithTasks.model_validate(p) for p in data]

    async def get_project(self, project_id: UUID) -> ProjectRead:
        return ProjectRead.model_validate(await self._request("GET", f"/projects/{project_id}"))

    async def create_project(
        self, title: str, description: str | None = None, color: str | None = None
    ) -> ProjectRead:
        body: dict[str, Any] = {"title": title}
        if description is not None:
            body["description"] = description
        if color is not None:
            body["color"] = color
        return ProjectRead.model_validate(await self._request("POST", "/projects", body))

    async def update_project(self, project_id: UUID, **changes: Any) -> ProjectRead:
        data = await self._request("PUT", f"/projects/{project_id}", changes)
        return ProjectRead.model_validate(data)

    async def delete_project(self, project_id: UUID) -> None:
        await self._request("DELETE", f"/projects/{project_id}")

    async def add_member(self, project_id: UUID, email: str) -> ProjectRead:
        data = await self._request("POST", f"/projects/{project_id}/members", {"email": email})
        return ProjectRead.model_validate(data)

    async def remove_member(self, project_id: UUID, user_id: UUID) -> ProjectRead:
        data = await self._request("DELETE", f"/projects/{project_id}/members/{user_id}")
        return ProjectRead.model_validate(data)

    # Tasks

    async def list_tasks(self, project_id: UUID) -> list[TaskRead]:
        data = await self._request("GET", f"/tasks/project/{project_id}")
        return [TaskRead.model_validate(t) for t in data]

    async def create_task(self, project_id: UUID, title: str, **fields: Any) -> TaskRead:
        body = {"project": str(project_id), "title": title, **fields}
        return TaskRead.model_validate(await self._request("POST", "/tasks", body))

    async def update_task(self, task_id: UUID, **changes: Any) -> TaskRead:
        return TaskRead.model_validate(await self._request("PUT", f"/tasks/{task_id}", changes))

    async def delete_task(self, task_id: UUID) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    # Comments

    async def list_comments(self, task_id: UUID) -> list[CommentRead]:
        data = await self._request("GET", f"/comments/task/{task_id}")
        return [CommentRead.model_validate(c) for c in data]

    async def create_comment(self, task_id: UUID, content: str) -> CommentRead:
        data = await self._request("POST", "/comments", {"task": str(task_id), "content": content})
        return CommentRead.model_validate(data)

    async def delete_comment(self, comment_id: UUID) -> None:
        await self._request("DELETE", f"/comments/{comment_id}")
