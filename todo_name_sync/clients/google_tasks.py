"""HTTP-клиент для Google Tasks API."""
from __future__ import annotations

from typing import Dict, List, Optional

import requests

from todo_name_sync.clients.errors import ProtocolError, TransientError, classify_response, parse_json
from todo_name_sync.clients.sessions import stateless_session
from todo_name_sync.clients.task_mapper import TaskMapper
from todo_name_sync.config import GoogleTasksSettings
from todo_name_sync.models import GOOGLE, Credentials, Task, TaskList

USER_AGENT = "todo-name-sync/0.1"


class GoogleTasksClient:
    """Минимальный клиент Google Tasks API (только чтение)."""

    def __init__(
        self,
        config: GoogleTasksSettings,
        session: Optional[requests.Session] = None,
        *,
        timeout: float = 30.0,
        mapper: Optional[TaskMapper] = None,
    ) -> None:
        self._config = config
        self._session = session or stateless_session()
        self._timeout = timeout
        self._mapper = mapper or TaskMapper()

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/")

    # region low-level helpers
    def _request(self, credentials: Credentials, method: str, endpoint: str, **kwargs) -> Dict:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        description = f"{method} {url}"
        headers = kwargs.pop("headers", {})
        headers.setdefault("User-Agent", USER_AGENT)
        headers.setdefault("Accept", "application/json")
        headers["Authorization"] = credentials.authorization
        try:
            response = self._session.request(method, url, headers=headers, timeout=self._timeout, **kwargs)
        except requests.Timeout as exc:
            raise TransientError(GOOGLE, f"Таймаут Google Tasks при запросе {description}") from exc
        except requests.RequestException as exc:
            raise TransientError(GOOGLE, f"Сетевая ошибка Google Tasks при запросе {description}: {exc}") from exc
        classify_response(GOOGLE, response, description)
        return parse_json(GOOGLE, response, description)

    @staticmethod
    def _items(payload: Dict, description: str) -> List[Dict]:
        # пустой список Google отдаёт без ключа items
        items = payload.get("items", [])
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise ProtocolError(GOOGLE, f"Поле items в ответе на {description} имеет неверный формат")
        return items

    # endregion

    def fetch_tasks(self, credentials: Credentials, tasklist_id: str) -> List[Task]:
        """Возвращает невыполненные задачи списка в порядке выдачи API."""
        params = {"showCompleted": "false", "showHidden": "false", "maxResults": "100"}
        payload = self._request(credentials, "GET", f"/tasks/v1/lists/{tasklist_id}/tasks", params=params)
        items = self._items(payload, f"список задач {tasklist_id}")
        return [self._mapper.map_task(item) for item in items if self._mapper.is_outstanding(item)]

    def list_tasklists(self, credentials: Credentials) -> List[TaskList]:
        """Возвращает списки задач пользователя."""
        payload = self._request(credentials, "GET", "/tasks/v1/users/@me/lists")
        items = self._items(payload, "списки задач")
        return [self._mapper.map_tasklist(item) for item in items]


__all__ = ["GoogleTasksClient"]
