"""Dispatcher tests: scope lookup order and error-to-result conversion."""

from __future__ import annotations

import types
import unittest

from browser_doubles import ScriptedFrontEnd

from mailpick.browser_model.errors import (
    BackendError,
    InputCancelled,
    InvariantViolation,
    OperationUnsupported,
    ScanError,
    SessionAborted,
)
from mailpick.commands.dispatcher import CommandDispatcher, build_dispatcher
from mailpick.commands.operations import HandlerResult, Operation


def _raiser(exc: Exception):
    def handler(session, operation):
        raise exc

    return handler


class CommandDispatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.front = ScriptedFrontEnd()
        self.session = types.SimpleNamespace(callbacks=self.front.callbacks())

    def _dispatch(self, handler) -> HandlerResult:
        return CommandDispatcher({Operation.TELL: handler}).dispatch(self.session, Operation.TELL)

    def test_first_scope_wins(self) -> None:
        dispatcher = CommandDispatcher(
            {Operation.HELP: lambda s, op: HandlerResult.SUCCESS},
            {Operation.HELP: lambda s, op: HandlerResult.ERROR},
        )
        self.assertIs(dispatcher.dispatch(self.session, Operation.HELP), HandlerResult.SUCCESS)

    def test_unmapped_operation_is_unknown(self) -> None:
        self.assertIs(CommandDispatcher({}).dispatch(self.session, Operation.HELP), HandlerResult.UNKNOWN)

    def test_cancelled_prompt_is_no_action_without_message(self) -> None:
        self.assertIs(self._dispatch(_raiser(InputCancelled("Chdir to: "))), HandlerResult.NO_ACTION)
        self.assertEqual(self.front.errors, [])

    def test_unsupported_operation(self) -> None:
        result = self._dispatch(_raiser(OperationUnsupported("only for IMAP")))
        self.assertIs(result, HandlerResult.NOT_IMPLEMENTED)
        self.assertEqual(self.front.errors, ["only for IMAP"])

    def test_recoverable_errors_report_and_continue(self) -> None:
        for exc in (ScanError("gone"), BackendError("NO denied"), InvariantViolation("Can't attach a directory")):
            with self.subTest(exc=type(exc).__name__):
                self.assertIs(self._dispatch(_raiser(exc)), HandlerResult.ERROR)
                self.assertEqual(self.front.errors[-1], str(exc))

    def test_session_abort_ends_session(self) -> None:
        result = self._dispatch(_raiser(SessionAborted("Error scanning directory: gone")))
        self.assertIs(result, HandlerResult.DONE)
        self.assertEqual(self.front.errors, ["Error scanning directory: gone"])

    def test_unexpected_exceptions_propagate(self) -> None:
        with self.assertRaises(KeyError):
            self._dispatch(_raiser(KeyError("bug")))

    def test_standard_dispatcher_maps_every_operation(self) -> None:
        dispatcher = build_dispatcher()
        for operation in Operation:
            with self.subTest(operation=operation):
                self.assertIsNotNone(dispatcher.handler_for(operation))


if __name__ == "__main__":
    unittest.main()
