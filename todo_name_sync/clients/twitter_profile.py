"""HTTP-клиент для чтения и записи имени профиля Twitter."""
from __future__ import annotations

from typing import Dict, Optional

import requests

from todo_name_sync.clients.errors import ProtocolError, TransientError, classify_response, parse_json
from todo_name_sync.clients.sessions import stateless_session
from todo_name_sync.config import TwitterSettings
from todo_name_sync.models import TWITTER, Credentials

USER_AGENT = "todo-name-sync/0.1"


class TwitterProfileClient:
    """Минимальный клиент Twitter API для отображаемого имени."""

    def __init__(
        self,
        config: TwitterSettings,
        session: Optional[requests.Session] = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        self._config = config
        self._session = session or stateless_session()
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/")

    def _request(self, credentials: Credentials, method: str, endpoint: str, **kwargs) -> Dict:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        description = f"{method} {url}"
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
            "Authorization": credentials.authorization,
        }
        try:
            response = self._session.request(method, url, headers=headers, timeout=self._timeout, **kwargs)
        except requests.Timeout as exc:
            raise TransientError(TWITTER, f"Таймаут Twitter при запросе {description}") from exc
        except requests.RequestException as exc:
            raise TransientError(TWITTER, f"Сетевая ошибка Twitter при запросе {description}: {exc}") from exc
        classify_response(TWITTER, response, description)
        return parse_json(TWITTER, response, description)

    def read_current_name(self, credentials: Credentials) -> str:
        """Возвращает текущее отображаемое имя."""
        payload = self._request(credentials, "GET", "/2/users/me")
        data = payload.get("data")
        name = data.get("name") if isinstance(data, dict) else None
        if not isinstance(name, str):
            raise ProtocolError(TWITTER, "В ответе /2/users/me нет поля data.name")
        return name

    def write_name(self, credentials: Credentials, name: str) -> None:
        """Устанавливает отображаемое имя. Повторная запись того же имени безопасна."""
        self._request(credentials, "POST", "/1.1/account/update_profile.json", data={"name": name})


__all__ = ["TwitterProfileClient"]
