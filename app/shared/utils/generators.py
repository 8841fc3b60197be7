"""ID and value generators (CUID primary keys, one-time codes)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

OTP_MIN = 100_000
OTP_MAX = 999_999


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2)."""
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_otp_code() -> str:
    """Return a 6-digit code drawn uniformly from [100000, 999999] (CSPRNG)."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))
