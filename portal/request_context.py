from __future__ import annotations

from contextvars import ContextVar


# "GET /events" for HTTP routes, "WS chat message" for real-time events.
current_endpoint: ContextVar[str] = ContextVar('current_endpoint', default='background')


def endpoint_label(kind: str, name: str) -> str:
    return f'{kind} {name}'
