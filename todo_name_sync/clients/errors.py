"""Классификация ошибок внешних провайдеров."""
from __future__ import annotations

from typing import Optional

import requests

AUTH_STATUSES = frozenset({400, 401, 403})
RATE_LIMIT_STATUS = 429


class ProviderError(RuntimeError):
    """Базовая ошибка обращения к провайдеру."""

    def __init__(self, provider: str, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class AuthError(ProviderError):
    """Токен недействителен, отозван или не имеет нужного scope."""


class TransientError(ProviderError):
    """Временная ошибка: сеть, таймаут, 5xx или лимит запросов."""


class ProtocolError(ProviderError):
    """Ответ провайдера не соответствует ожидаемому формату."""


def classify_response(provider: str, response: requests.Response, description: str) -> None:
    """Бросает исключение подходящего класса, если ответ неуспешный."""
    status = response.status_code
    if status < 400:
        return
    message = f"Ошибка {provider} {status} при запросе {description}: {response.text}"
    if status in AUTH_STATUSES:
        raise AuthError(provider, message, status_code=status)
    if status == RATE_LIMIT_STATUS or status >= 500:
        raise TransientError(provider, message, status_code=status)
    raise ProtocolError(provider, message, status_code=status)


def parse_json(provider: str, response: requests.Response, description: str) -> dict:
    """Возвращает тело ответа как JSON-объект."""
    try:
        payload = response.json()
    except ValueError as exc:
        raise ProtocolError(
            provider, f"Ответ {provider} на {description} не является JSON", status_code=response.status_code
        ) from exc
    if not isinstance(payload, dict):
        raise ProtocolError(provider, f"Ответ {provider} на {description} не является объектом")
    return payload


__all__ = [
    "ProviderError",
    "AuthError",
    "TransientError",
    "ProtocolError",
    "classify_response",
    "parse_json",
]
