"""HTTP-клиенты внешних провайдеров."""

from .errors import AuthError, ProtocolError, ProviderError, TransientError
from .google_tasks import GoogleTasksClient
from .task_mapper import TaskMapper
from .twitter_profile import TwitterProfileClient

__all__ = [
    "GoogleTasksClient",
    "TwitterProfileClient",
    "TaskMapper",
    "ProviderError",
    "AuthError",
    "TransientError",
    "ProtocolError",
]
