"""Shared runtime pieces: errors, a settable clock, token balances and an event log."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterator, TypeVar

U64_MAX = 2**64 - 1

E = TypeVar("E")


class ProgramError(Exception):
    """Base error for every failed instruction."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InsufficientBalanceError(ProgramError):
    """A token account holds less than a transfer asks for."""

    def __init__(self, account: str, balance: int, amount: int) -> None:
        super().__init__(
            f"insufficient funds in {account}: balance {balance}, needed {amount}"
        )
        self.account = account
        self.balance = balance
        self.amount = amount


@dataclass
class Clock:
    """Unix time that only moves when told to."""

    unix_timestamp: int = 0

    def now(self) -> int:
        return self.unix_timestamp

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("the clock cannot move backwards")
        self.unix_timestamp += seconds
        return self.unix_timestamp


def _check_amount(amount: int) -> None:
    if amount < 0 or amount > U64_MAX:
        raise ValueError(f"token amount out of range: {amount}")


@dataclass
class TokenLedger:
    """Balances of token accounts, addressed by name."""

    _balances: defaultdict[str, int] = field(
        default_factory=lambda: defaultdict(int), repr=False
    )

    def mint_to(self, account: str, amount: int) -> int:
        _check_amount(amount)
        new_balance = self._balances[account] + amount
        if new_balance > U64_MAX:
            raise OverflowError(f"balance of {account} would overflow")
        self._balances[account] = new_balance
        return new_balance

    def transfer(self, source: str, destination: str, amount: int) -> None:
        _check_amount(amount)
        available = self._balances[source]
        if available < amount:
            raise InsufficientBalanceError(source, available, amount)
        if source == destination:
            return
        if self._balances[destination] + amount > U64_MAX:
            raise OverflowError(f"balance of {destination} would overflow")
        self._balances[source] -= amount
        self._balances[destination] += amount

    def balance(self, account: str) -> int:
        return self._balances.get(account, 0)


@dataclass
class EventLog:
    """Events in the order they were emitted."""

    events: list[Any] = field(default_factory=list)

    def emit(self, event: E) -> E:
        self.events.append(event)
        return event

    def of_type(self, event_type: type[E]) -> list[E]:
        return [event for event in self.events if isinstance(event, event_type)]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)