"""Operation ids, handler tables and the dispatcher."""

from __future__ import annotations

from .dispatcher import CommandDispatcher, Handler, build_dispatcher
from .operations import HandlerResult, Operation

__all__ = [
    "Operation",
    "HandlerResult",
    "Handler",
    "CommandDispatcher",
    "build_dispatcher",
]
