"""Short random identifiers for stored records."""
import secrets
import string

_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(length: int = 9) -> str:
    """Return a random base-36 identifier."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))
