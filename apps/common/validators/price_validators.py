"""
Amount and quantity validators.
"""
from decimal import Decimal, InvalidOperation

from ..exceptions import ValidationError


def validate_quantity(value, min_value=1):
    """
    Validate quantity is a whole number and meets minimum requirement.

    Raises:
        ValidationError: If quantity is invalid

    Returns:
        int: Validated quantity
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Quantity must be an integer.")

    if value < min_value:
        raise ValidationError(f"Quantity must be at least {min_value}.")

    return value


def validate_amount(value, field='amount'):
    """
    Validate a currency amount: required, numeric and not negative.

    Returns:
        decimal.Decimal: Validated amount
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required.")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number.")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number.")
    if amount < 0:
        raise ValidationError(f"{field} must not be negative.")
    return amount
