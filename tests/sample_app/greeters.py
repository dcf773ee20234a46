"""A protocol capability with a nominal and a structural implementation."""

from __future__ import annotations

from typing import Protocol


class Greeter(Protocol):
    def greet(self, name: str) -> str: ...


class EnglishGreeter(Greeter):
    def greet(self, name: str) -> str:
        return f"Hello, {name}"


class DuckGreeter:
    """Has the right shape but does not declare the protocol."""

    def greet(self, name: str) -> str:
        return f"Quack, {name}"
