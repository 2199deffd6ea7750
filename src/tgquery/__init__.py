"""tgquery - typed queries over an asynchronous chat client engine."""

from .config import Settings, get_settings
from .dispatcher import Dispatcher
from .engine import ClientEngine, CorrelatedEngine, JsonTransport
from .envelope import ErrorDescriptor, Outcome, ResultEnvelope
from .errors import ConfigurationError, InvalidArgumentError, TgQueryError, UpstreamError
from .facade import UserQueries
from .handle import Pending

__version__ = "0.1.0"

__all__ = [
    "ClientEngine",
    "ConfigurationError",
    "CorrelatedEngine",
    "Dispatcher",
    "ErrorDescriptor",
    "InvalidArgumentError",
    "JsonTransport",
    "Outcome",
    "Pending",
    "ResultEnvelope",
    "Settings",
    "TgQueryError",
    "UpstreamError",
    "UserQueries",
    "get_settings",
]
