"""Optional Pydantic Logfire hooks.

Everything here is a no-op until ``configure`` finds logfire installed and
enabled in settings.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tubeline.config import LogfireConfig, Settings

_logfire = None


def logfire_options(config: LogfireConfig) -> dict[str, Any]:
    """Keyword arguments for ``logfire.configure`` (console excluded)."""
    options: dict[str, Any] = {"service_name": config.service_name, "send_to_logfire": "if-token-present"}
    if config.environment:
        options["environment"] = config.environment
    if config.sample_rate < 1.0:
        options["trace_sample_rate"] = config.sample_rate
    return options


def configure(settings: Settings) -> None:
    global _logfire

    if not settings.logfire.enabled:
        return
    try:
        import logfire
    except ImportError:
        return

    options = logfire_options(settings.logfire)
    if settings.logfire.console:
        options["console"] = logfire.ConsoleOptions()
    logfire.configure(**options)
    _logfire = logfire


def instrument_app(app):
    return _logfire.instrument_asgi(app) if _logfire else app


def instrument_sqlalchemy(engine) -> None:
    if _logfire:
        _logfire.instrument_sqlalchemy(engine=engine)


@contextmanager
def span(name: str, **attrs: Any):
    if _logfire is None:
        yield None
        return
    with _logfire.span(name, **attrs) as current:
        yield current


def exception(msg: str, **kwargs: Any) -> bool:
    """Send an exception with traceback to logfire. False when logfire is off."""
    if _logfire is None:
        return False
    _logfire.exception(msg, **kwargs)
    return True
