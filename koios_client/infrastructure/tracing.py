"""Request timing collected through httpcore's ``trace`` extension."""

import time
from typing import Any, Awaitable, Callable, Dict

from .response import RequestStats

TraceCallback = Callable[[str, Dict[str, Any]], Awaitable[None]]

# httpcore event prefix -> RequestStats duration field
_PHASES = {
    "connection.connect_tcp": "est_cxn_dur",
    "connection.connect_unix_socket": "est_cxn_dur",
    "connection.start_tls": "tls_hs_dur",
}


def stats_trace(stats: RequestStats) -> TraceCallback:
    """
    Build an async trace callback that records phase timings on ``stats``.

    httpcore reports connection setup (TCP connect, TLS handshake) and the
    HTTP exchange; name resolution is part of the TCP connect phase, so
    ``dns_lookup_dur`` is never set. Phases skipped because a pooled
    connection was reused stay None.
    """
    started: Dict[str, float] = {}

    async def trace(event_name: str, info: Dict[str, Any]):
        prefix, _, step = event_name.rpartition(".")
        if prefix in _PHASES:
            if step == "started":
                started[prefix] = time.perf_counter()
            elif step in ("complete", "failed") and prefix in started:
                setattr(
                    stats,
                    _PHASES[prefix],
                    time.perf_counter() - started.pop(prefix),
                )
        elif (
            prefix.endswith("receive_response_headers")
            and step == "complete"
            and stats.ttfb is None
        ):
            stats.ttfb = stats.elapsed()

    return trace
