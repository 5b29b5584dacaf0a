"""
TOTP primitives: secrets, provisioning URIs, QR codes, code verification, recovery codes.

Codes are standard RFC 6238 TOTP (6 digits, 30 second step). Verification accepts
one step of clock skew either side and reports which time-step matched so the
caller can refuse a code that was already used.
"""

import base64
import hashlib
import io
import secrets
from datetime import datetime, timezone as dt_timezone

import pyotp
import qrcode
from qrcode.constants import ERROR_CORRECT_M

DIGITS        = 6
INTERVAL      = 30
VALID_WINDOW  = 1
RECOVERY_CODE_COUNT = 8


def new_secret() -> str:
    return pyotp.random_base32()


def provisioning_uri(secret: str, account: str, issuer: str) -> str:
    return pyotp.TOTP(secret, digits=DIGITS, interval=INTERVAL).provisioning_uri(
        name=account, issuer_name=issuer,
    )


def qr_data_url(data: str) -> str:
    """Render `data` as a PNG QR code and return it as a data: URL."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=8, border=2)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def _as_datetime(for_time):
    if for_time is None:
        return datetime.now(dt_timezone.utc)
    return for_time


def matching_step(secret: str, code: str, for_time=None, window: int = VALID_WINDOW):
    """
    Return the TOTP time-step `code` is valid for, or None.
    Steps within `window` of the current one are checked.
    """
    if not secret or not code:
        return None
    code = str(code).strip().replace(" ", "")
    if len(code) != DIGITS or not code.isdigit():
        return None

    totp = pyotp.TOTP(secret, digits=DIGITS, interval=INTERVAL)
    when = _as_datetime(for_time)
    current = totp.timecode(when)
    for offset in range(-window, window + 1):
        if pyotp.utils.strings_equal(code, totp.at(when, counter_offset=offset)):
            return current + offset
    return None


# ── Recovery codes ────────────────────────────────────────────────────────────
def hash_recovery_code(code: str) -> str:
    normalised = code.strip().lower().replace("-", "")
    return hashlib.sha256(normalised.encode()).hexdigest()


def new_recovery_codes(count: int = RECOVERY_CODE_COUNT):
    """Return (plain_codes, hashed_codes). Only the hashes are persisted."""
    plain = []
    for _ in range(count):
        raw = secrets.token_hex(4)
        plain.append(f"{raw[:4]}-{raw[4:]}")
    return plain, [hash_recovery_code(c) for c in plain]
