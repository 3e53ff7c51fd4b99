"""Общие настройки HTTP-сессий клиентов."""
from __future__ import annotations

from http.cookiejar import DefaultCookiePolicy

import requests


def stateless_session() -> requests.Session:
    """Сессия, которая не сохраняет cookies между запросами.

    Одна сессия обслуживает запросы разных пользователей, поэтому
    cookie одного пользователя не должна уйти с запросом другого.
    """
    session = requests.Session()
    session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
    return session


__all__ = ["stateless_session"]
