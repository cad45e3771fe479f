import secrets
import string
import time

OID_ALPHABET = string.ascii_letters + string.digits
OID_LENGTH = 15


def generate_oid(length: int = OID_LENGTH) -> str:
    return "".join(secrets.choice(OID_ALPHABET) for _ in range(length))


def epoch_seconds() -> int:
    return int(time.time())
