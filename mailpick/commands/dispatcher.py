"""Operation dispatch with central error conversion.

Handlers are plain functions ``handler(session, operation) -> HandlerResult``.
Scopes are tried in order (browser, menu, global); the first scope that maps
an operation wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from ..browser_model.errors import (
    BackendError,
    InputCancelled,
    InvariantViolation,
    OperationUnsupported,
    ScanError,
    SessionAborted,
)
from .operations import HandlerResult, Operation

if TYPE_CHECKING:
    from ..runtime.session import BrowserSession

logger = logging.getLogger(__name__)

Handler = Callable[["BrowserSession", Operation], HandlerResult]


class CommandDispatcher:
    """Ordered handler tables keyed by ``Operation``."""

    def __init__(self, *scopes: Mapping[Operation, Handler]) -> None:
        self._scopes: tuple[Mapping[Operation, Handler], ...] = scopes

    def handler_for(self, operation: Operation) -> Handler | None:
        for scope in self._scopes:
            handler = scope.get(operation)
            if handler is not None:
                return handler
        return None

    def dispatch(self, session: BrowserSession, operation: Operation) -> HandlerResult:
        """Run the handler for ``operation`` and convert browser errors to results."""
        handler = self.handler_for(operation)
        if handler is None:
            logger.debug("no handler for %s", operation)
            return HandlerResult.UNKNOWN
        try:
            result = handler(session, operation)
        except InputCancelled:
            result = HandlerResult.NO_ACTION
        except OperationUnsupported as exc:
            session.callbacks.error(str(exc))
            result = HandlerResult.NOT_IMPLEMENTED
        except SessionAborted as exc:
            logger.error("session aborted: %s", exc)
            session.callbacks.error(str(exc))
            result = HandlerResult.DONE
        except (ScanError, BackendError, InvariantViolation) as exc:
            session.callbacks.error(str(exc))
            result = HandlerResult.ERROR
        logger.debug("dispatched %s -> %s", operation.value, result.value)
        return result


def build_dispatcher() -> CommandDispatcher:
    """Dispatcher with the standard browser, remote, menu and global tables."""
    from .browser_ops import BROWSER_FUNCTIONS
    from .menu_ops import GLOBAL_FUNCTIONS, MENU_FUNCTIONS
    from .remote_ops import REMOTE_FUNCTIONS

    return CommandDispatcher({**BROWSER_FUNCTIONS, **REMOTE_FUNCTIONS}, MENU_FUNCTIONS, GLOBAL_FUNCTIONS)


__all__ = ["Handler", "CommandDispatcher", "build_dispatcher"]
