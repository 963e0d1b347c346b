"""
Points arithmetic.

Pure helpers shared by the preview and commit paths so quoted and awarded
points always agree. Results are floored, never rounded.
"""
from decimal import Decimal, InvalidOperation, ROUND_FLOOR

from apps.common.exceptions import InvalidArgument

# Points are quoted per this many currency units spent
POINTS_UNIT_AMOUNT = Decimal('1000')


def _as_decimal(value, name):
    if isinstance(value, bool) or value is None:
        raise InvalidArgument(f"{name} must be a number")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidArgument(f"{name} must be a number")
    if not result.is_finite():
        raise InvalidArgument(f"{name} must be a finite number")
    if result < 0:
        raise InvalidArgument(f"{name} must not be negative")
    return result


def _as_int(value, name):
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer")
    if value < 0:
        raise InvalidArgument(f"{name} must not be negative")
    return value


def _floor(value):
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def earned_points(amount, points_per_unit) -> int:
    """Base points for a sale: floor(amount / 1000 * points_per_unit)"""
    amount = _as_decimal(amount, 'amount')
    points_per_unit = _as_int(points_per_unit, 'points_per_unit')
    return _floor(amount * points_per_unit / POINTS_UNIT_AMOUNT)


def apply_tier_multiplier(base_points, multiplier) -> int:
    """floor(base_points * multiplier); 10 points at 1.15x is 11, not 12"""
    base_points = _as_int(base_points, 'base_points')
    multiplier = _as_decimal(multiplier, 'multiplier')
    return _floor(base_points * multiplier)


def redemption_value(points, value_per_point) -> Decimal:
    """Currency discount granted for redeeming ``points``"""
    points = _as_int(points, 'points')
    value_per_point = _as_int(value_per_point, 'redemption_value')
    return Decimal(points * value_per_point)


def preview_earn(sale_amount, customer_tier, rules) -> int:
    """
    Points a sale would earn for a customer of ``customer_tier``.

    Returns 0 when the program is disabled. Side-effect free; the ledger's
    earn operation uses the same computation.
    """
    if not rules.is_enabled:
        _as_decimal(sale_amount, 'amount')
        return 0
    base = earned_points(sale_amount, rules.points_per_unit)
    return apply_tier_multiplier(base, rules.multiplier_for(customer_tier))
