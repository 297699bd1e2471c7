"""Business logic for looking up how often a set of numbers was drawn together."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import and_, bindparam, func, or_, select
from sqlalchemy.sql.elements import ColumnElement

from lottostats.errors import InvalidArgument
from lottostats.models.draw import INTEGER_MAX, INTEGER_MIN, PRIMARY_COLUMNS
from lottostats.store import DrawStore, draws


@dataclass(frozen=True)
class MembershipResult:
    numbers: list[int]
    exists: bool
    frequency: int


def _normalize_candidates(numbers: Iterable[int] | None) -> list[int]:
    if numbers is None:
        raise InvalidArgument(message="numbers must be a non-empty list", details={"numbers": ["Required"]})

    out: list[int] = []
    for n in numbers:
        if isinstance(n, bool) or not isinstance(n, int):
            raise InvalidArgument(message="numbers must be integers", details={"numbers": [f"Not an integer: {n!r}"]})
        if not INTEGER_MIN <= n <= INTEGER_MAX:
            raise InvalidArgument(message="numbers are out of range", details={"numbers": [f"Out of range: {n}"]})
        # Repeats add nothing to an all-of predicate.
        if n not in out:
            out.append(n)

    if not out:
        raise InvalidArgument(message="numbers must be a non-empty list", details={"numbers": ["Must not be empty"]})
    return out


def build_membership_predicate(numbers: list[int]) -> ColumnElement[bool]:
    """All candidates present, each in any of the six primary positions.

    Every value is a bound parameter.
    """

    clauses = []
    for i, n in enumerate(numbers):
        value = bindparam(f"n{i}", n)
        clauses.append(or_(*(draws.c[column] == value for column in PRIMARY_COLUMNS)))
    return and_(*clauses)


class MembershipLookupService:
    """Count draws whose primary numbers include every candidate."""

    def occurrence_count(self, store: DrawStore, numbers: Iterable[int] | None) -> int:
        candidates = _normalize_candidates(numbers)
        stmt = select(func.count()).select_from(draws).where(build_membership_predicate(candidates))
        return int(store.scalar(stmt) or 0)

    def search(self, store: DrawStore, numbers: Iterable[int] | None) -> MembershipResult:
        candidates = _normalize_candidates(numbers)
        frequency = self.occurrence_count(store, candidates)
        return MembershipResult(numbers=candidates, exists=frequency > 0, frequency=frequency)
