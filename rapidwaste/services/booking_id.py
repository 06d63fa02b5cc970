import re
import secrets
import string

BOOKING_ID_ALPHABET = string.ascii_uppercase + string.digits
BOOKING_ID_SUFFIX_LENGTH = 6
BOOKING_ID_PATTERN = re.compile(r"^(EMG|BLK|REG)-[A-Z0-9]{6}$")

_PREFIXES = {
    "emergency": "EMG",
    "bulk": "BLK",
}


def booking_id_prefix(service_type) -> str:
    key = service_type.value if hasattr(service_type, "value") else str(service_type)
    return _PREFIXES.get(key, "REG")


def generate_booking_id(service_type) -> str:
    """Random ``PREFIX-XXXXXX`` id; uniqueness is checked by the caller."""
    suffix = "".join(secrets.choice(BOOKING_ID_ALPHABET) for _ in range(BOOKING_ID_SUFFIX_LENGTH))
    return f"{booking_id_prefix(service_type)}-{suffix}"
