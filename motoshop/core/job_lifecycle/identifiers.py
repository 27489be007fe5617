"""
Human-friendly identifier generators.

Job and shop ids are short enough to read over the phone; tracking ids
are handed to customers to look up their job.

Dependencies: secrets, time
System role: Id assignment at job intake and shop registration
"""

import secrets
import string
import time

_BASE36 = string.digits + string.ascii_uppercase
TRACKING_ALPHABET = string.ascii_uppercase + string.digits
TRACKING_ID_LENGTH = 8


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def _random_base36(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_job_id() -> str:
    """Return a new job id, e.g. ``JOB-LXQ2K9ZAB3C``."""
    return f"JOB-{_to_base36(int(time.time() * 1000))}{_random_base36(3)}"


def generate_shop_id() -> str:
    """Return a new shop id, e.g. ``SHOP-LXQ2K9ZA4F2Q``."""
    return f"SHOP-{_to_base36(int(time.time() * 1000))}{_random_base36(4)}"


def generate_tracking_id() -> str:
    """Return an 8-character customer tracking id."""
    return "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_ID_LENGTH))
