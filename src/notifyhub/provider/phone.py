"""Phone number formatting for SMS gateways

Numbers in the directory are free-form, usually Ghanaian local numbers like
"024 123 4567". Gateways want international form.
"""

import re

_NON_DIGITS = re.compile(r"\D")


def format_phone_for_sms(phone: str | None, default_country_code: str = "+233") -> str:
    """Format a phone number as +<country><number>

    Numbers already starting with "+" are returned as given (trimmed).
    Values without any subscriber digits ("N/A", "-", "0") give "".
    """
    if not phone:
        return ""
    phone = phone.strip()
    digits = _NON_DIGITS.sub("", phone)
    if not digits.lstrip("0"):
        return ""
    if phone.startswith("+"):
        return phone

    country_digits = _NON_DIGITS.sub("", default_country_code)

    # trunk prefix 0 replaced by the country code
    if digits.startswith("0"):
        return f"+{country_digits}{digits[1:]}"
    if country_digits and digits.startswith(country_digits):
        return f"+{digits}"
    # Ghana mobile numbers without the leading 0
    if country_digits == "233" and len(digits) == 9:
        return f"+233{digits}"
    return f"+{country_digits}{digits}"


def to_e164(phone: str | None, default_country_code: str = "+233") -> str:
    """E.164: "+" followed by digits only"""
    formatted = format_phone_for_sms(phone, default_country_code)
    if not formatted:
        return ""
    return "+" + _NON_DIGITS.sub("", formatted)


def to_digits_international(phone: str | None, default_country_code: str = "+233") -> str:
    """International form without "+", for gateways that want digits only"""
    return to_e164(phone, default_country_code).lstrip("+")


def validate_phone_number(phone: str | None, default_country_code: str = "+233") -> tuple[bool, str | None]:
    """Return (is_valid, error)"""
    if not phone or not phone.strip():
        return False, "Phone number is required"

    formatted = format_phone_for_sms(phone, default_country_code)
    if not formatted:
        return False, "Phone number has no digits"
    if not formatted.startswith("+"):
        return False, "Phone number should include country code"

    digits = _NON_DIGITS.sub("", formatted)
    if len(digits) < 10 or len(digits) > 15:
        return False, "Phone number length is invalid"
    return True, None
