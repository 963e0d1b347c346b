"""
Points-related validators.

These raise the domain ``ValidationError`` so the same checks guard both the
HTTP layer and direct service calls.
"""
from decimal import Decimal, InvalidOperation

from ..constants import TIER_ORDER
from ..exceptions import ValidationError


def _coerce_int(value, field):
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    try:
        as_decimal = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be an integer.")
    if not as_decimal.is_finite() or as_decimal != as_decimal.to_integral_value():
        raise ValidationError(f"{field} must be an integer.")
    return int(as_decimal)


def validate_points_amount(value, field='points'):
    """
    Validate a points amount that must be strictly positive.

    Returns:
        int: Validated points amount
    """
    value = _coerce_int(value, field)
    if value <= 0:
        raise ValidationError(f"{field} must be greater than 0.")
    return value


def validate_non_negative_points(value, field='points'):
    value = _coerce_int(value, field)
    if value < 0:
        raise ValidationError(f"{field} must not be negative.")
    return value


def validate_tier_thresholds(thresholds):
    """
    Validate a tier threshold table.

    The table must name exactly the four tiers, each with a non-negative integer,
    and the values must be non-decreasing from bronze to platinum.

    Returns:
        dict: Normalized table ordered by tier rank
    """
    if not isinstance(thresholds, dict):
        raise ValidationError("tier_thresholds must be an object keyed by tier name.")

    unknown = set(thresholds) - set(TIER_ORDER)
    if unknown:
        raise ValidationError(f"Unknown tiers in tier_thresholds: {', '.join(sorted(unknown))}.")
    missing = [tier for tier in TIER_ORDER if tier not in thresholds]
    if missing:
        raise ValidationError(f"tier_thresholds is missing: {', '.join(missing)}.")

    normalized = {}
    previous_tier = None
    for tier in TIER_ORDER:
        value = validate_non_negative_points(thresholds[tier], field=f"tier_thresholds.{tier}")
        if previous_tier is not None and value < normalized[previous_tier]:
            raise ValidationError(
                f"tier_thresholds must be non-decreasing: {tier} ({value}) is below "
                f"{previous_tier} ({normalized[previous_tier]})."
            )
        normalized[tier] = value
        previous_tier = tier
    return normalized


def validate_tier_multipliers(multipliers):
    """
    Validate a tier multiplier table. Tiers may be omitted (they earn at 1x) but
    every listed multiplier must be a decimal of at least 1.

    Returns:
        dict: Normalized table with multipliers stored as decimal strings
    """
    if not isinstance(multipliers, dict):
        raise ValidationError("tier_multipliers must be an object keyed by tier name.")

    unknown = set(multipliers) - set(TIER_ORDER)
    if unknown:
        raise ValidationError(f"Unknown tiers in tier_multipliers: {', '.join(sorted(unknown))}.")

    normalized = {}
    for tier in TIER_ORDER:
        if tier not in multipliers:
            continue
        raw = multipliers[tier]
        if isinstance(raw, bool):
            raise ValidationError(f"tier_multipliers.{tier} must be a number.")
        try:
            value = Decimal(str(raw))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"tier_multipliers.{tier} must be a number.")
        if not value.is_finite() or value < 1:
            raise ValidationError(f"tier_multipliers.{tier} must be at least 1.")
        normalized[tier] = str(value)
    return normalized


def validate_special_rules(rules):
    """Validate named bonus amounts (birthday, welcome, referral, ...)"""
    if not isinstance(rules, dict):
        raise ValidationError("special_rules must be an object of named bonus amounts.")

    normalized = {}
    for name, amount in rules.items():
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("special_rules names must be non-empty strings.")
        normalized[name.strip()] = validate_non_negative_points(amount, field=f"special_rules.{name}")
    return normalized
