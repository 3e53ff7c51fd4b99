"""Синхронизация имени профиля со списком невыполненных задач."""

__version__ = "0.1.0"
