"""Reusable key-combo registry primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..commands.operations import Operation


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single operation."""

    combos: tuple[str, ...]
    operation: Operation
    label: str = ""


class KeyComboRegistry:
    """Key-to-operation table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        self._normalize = normalize if normalize is not None else self._identity
        self._operations: dict[str, Operation] = {}
        self._bindings: list[KeyComboBinding] = []

    @staticmethod
    def _identity(key: str) -> str:
        return key

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing operations for same combos."""
        for combo in binding.combos:
            self._operations[self._normalize(combo)] = binding.operation
        self._bindings.append(binding)
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def lookup(self, key: str) -> Operation | None:
        """Return the operation bound to ``key``, if any."""
        return self._operations.get(self._normalize(key))

    def bindings(self) -> tuple[KeyComboBinding, ...]:
        return tuple(self._bindings)

    def keys_for(self, operation: Operation) -> tuple[str, ...]:
        return tuple(key for key, bound in self._operations.items() if bound is operation)


__all__ = ["KeyComboBinding", "KeyComboRegistry"]
