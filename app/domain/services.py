# app/domain/services.py
from __future__ import annotations

import base64
import hashlib
import secrets

CODE_BYTES = 32


def generate_code() -> str:
    """URL-safe random code with CODE_BYTES of entropy."""
    return secrets.token_urlsafe(CODE_BYTES)


def code_digest(code: str) -> str:
    """
    SHA256 of the code, urlsafe-base64 without padding.
    The store keys codes by digest so a dump never exposes live codes.
    """
    digest = hashlib.sha256(code.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
