"""Ordering rules shared by customizers, contributors and description customizers.

Components sort by tier first: anything declaring ``HIGHEST_PRECEDENCE`` runs
before every other component, whatever numeric order the others declare.
Inside the default tier a lower order runs earlier and components without an
order use ``DEFAULT_ORDER``.  Registration order breaks remaining ties.
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class Precedence(Enum):
    """Reserved ordering tiers."""

    HIGHEST = "highest"


HIGHEST_PRECEDENCE = Precedence.HIGHEST
DEFAULT_ORDER = 0

Order = Union[int, Precedence, None]


def order_key(order: Order, index: int) -> tuple[int, int, int]:
    """Return the sort key for a component with *order* registered at *index*."""
    if order is HIGHEST_PRECEDENCE:
        return (0, 0, index)
    return (1, DEFAULT_ORDER if order is None else order, index)


def order_of(component: object) -> Order:
    """Read the ``order`` attribute a component instance declares, if any."""
    order = getattr(component, "order", None)
    if order is None or order is HIGHEST_PRECEDENCE or isinstance(order, int):
        return order
    raise TypeError(
        f"{type(component).__name__}.order must be an int or HIGHEST_PRECEDENCE, got {order!r}"
    )
