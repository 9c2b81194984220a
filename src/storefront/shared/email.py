"""Email normalization for the denormalized address stored on orders.

Orders keep a lowercase copy of the customer's email so the public order
lookup can match it exactly. The structural checks mirror the ones applied to
customer email addresses elsewhere on the platform.
"""

from protean.exceptions import ValidationError

EMAIL_REQUIRED_MESSAGE = "Please provide an email address"

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def _invalid(email):
    return ValidationError({"email": [f"Invalid email address: {email!r}"]})


def normalize_email(email):
    """Return the stripped, lowercased address or raise ValidationError."""
    if not email or not isinstance(email, str):
        raise ValidationError({"email": [EMAIL_REQUIRED_MESSAGE]})

    normalized = email.strip().lower()

    if any(ch.isspace() for ch in normalized) or len(normalized) > 254:
        raise _invalid(email)
    if normalized.count("@") != 1:
        raise _invalid(email)

    local_part, domain_part = normalized.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        raise _invalid(email)
    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        raise _invalid(email)
    if "." not in domain_part:
        raise _invalid(email)
    if ".." in local_part or ".." in domain_part:
        raise _invalid(email)
    for label in domain_part.split("."):
        if label.startswith("-") or label.endswith("-"):
            raise _invalid(email)
    if any(ch in normalized for ch in _FORBIDDEN):
        raise _invalid(email)

    return normalized
