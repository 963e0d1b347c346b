"""
Customer contact validators.
"""
import re

from ..exceptions import ValidationError

# Optional leading +, then 7 to 15 digits once separators are removed
MOBILE_PATTERN = re.compile(r'^\+?\d{7,15}$')


def normalize_mobile(value):
    """Strip whitespace and dashes from a mobile number"""
    if value is None:
        return ''
    return re.sub(r'[\s\-]+', '', str(value))


def validate_mobile(value):
    """
    Validate and normalize a mobile number.

    Raises:
        ValidationError: If the number is missing or malformed

    Returns:
        str: Normalized mobile number
    """
    mobile = normalize_mobile(value)
    if not mobile:
        raise ValidationError("Mobile number is required.")
    if not MOBILE_PATTERN.match(mobile):
        raise ValidationError("Invalid mobile number format.")
    return mobile
