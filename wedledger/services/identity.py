"""
Deterministic account identifiers derived from phone numbers.

An account id can be computed before the account row exists, which lets the
OTP flow create-or-find a user in a single step.
"""
import re

_SEPARATORS = re.compile(r"[\s-]")


def normalize_phone(phone: str) -> str:
    return _SEPARATORS.sub("", phone)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def phone_hash(phone: str) -> int:
    h = 0
    for ch in phone:
        h = _to_int32((h << 5) - h + ord(ch))
    return h


def user_id_from_phone(phone: str) -> str:
    """UUID-shaped id for a normalized phone number.

    The hash is a 32-bit rolling hash, so collisions are possible but rare.
    The version ("4") and variant ("a") nibbles are fixed.
    """
    digits = format(abs(phone_hash(phone)), "x").rjust(32, "0")
    return f"{digits[0:8]}-{digits[8:12]}-4{digits[12:15]}-a{digits[15:18]}-{digits[18:30]}"
