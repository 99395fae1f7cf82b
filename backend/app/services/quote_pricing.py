from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Iterable, Mapping

from ..schemas.provider_match import Measurement

_CENT = Decimal("0.01")


def _to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default


def measurement_area(measurement: Measurement) -> Decimal:
    """Area of a measurement: ``area`` when non-zero, else width x length."""
    if measurement.area:
        return _to_decimal(measurement.area)
    return _to_decimal(measurement.width) * _to_decimal(measurement.length)


def compute_total_price(
    base_price: Any,
    items: Mapping[str, Any] | None = None,
    measurements: Iterable[Measurement] | None = None,
    item_prices: Mapping[str, Any] | None = None,
) -> Decimal:
    """Return the provider's total for a quote request.

    ``item_prices`` maps item id to the provider's own unit price. Items the
    provider never priced are charged at ``base_price`` per unit, and every
    measurement adds ``base_price`` per unit of area.
    """
    base = _to_decimal(base_price)
    item_prices = item_prices or {}
    total = base

    for item_id, quantity in (items or {}).items():
        qty = _to_decimal(quantity)
        if item_id in item_prices:
            total += _to_decimal(item_prices[item_id]) * qty
        else:
            total += base * qty

    for measurement in measurements or ():
        total += base * measurement_area(measurement)

    return total.quantize(_CENT, rounding=ROUND_HALF_UP)
