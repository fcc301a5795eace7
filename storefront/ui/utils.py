"""Presentation helpers: price formatting and class-name composition."""

from collections.abc import Iterable, Iterator, Mapping
from decimal import Decimal
from typing import Any


def format_price(amount: float | Decimal | None, currency: str = "$") -> str:
    """Format an amount with a currency symbol and two decimals.

    Args:
        amount: Price in major units; None counts as 0.
        currency: Symbol prepended to the amount.

    Returns:
        Formatted price, e.g. "$599.99".
    """
    return f"{currency}{(amount if amount is not None else 0):.2f}"


def _class_names(value: Any) -> Iterator[str]:
    if value is None or isinstance(value, bool):
        return
    if isinstance(value, str):
        yield from value.split()
    elif isinstance(value, Mapping):
        for name, enabled in value.items():
            if enabled:
                yield from str(name).split()
    elif isinstance(value, (int, float)):
        if value:
            yield str(value)
    elif isinstance(value, Iterable):
        for item in value:
            yield from _class_names(item)


def cn(*inputs: Any) -> str:
    """Compose CSS class names.

    Accepts strings, iterables and mappings of class name to condition;
    falsy entries are dropped. Repeated classes keep their last position.

        cn("px-2", {"text-white": active}, ["mb-2", None])
    """
    names = list(_class_names(inputs))
    seen: set[str] = set()
    kept: list[str] = []
    for name in reversed(names):
        if name not in seen:
            seen.add(name)
            kept.append(name)
    return " ".join(reversed(kept))
