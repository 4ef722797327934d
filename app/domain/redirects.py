"""
Redirect target resolution.

A caller-supplied redirect is only ever used after it fully matches one of the
client's registered patterns. In a pattern, ``*`` stands for any run of
characters inside a single URI component: it never spans ``/``, ``?``, ``#`` or
``\\`` (which browsers read as ``/``), and never matches ``@``, whitespace or
control characters. So ``https://*.example.com/cb`` accepts
``https://app.example.com/cb`` but neither ``https://evil.test/.example.com/cb``
nor ``https://evil.test\\.example.com/cb``.
"""

from __future__ import annotations

import re
from typing import Iterable

from app.domain.entities import RedirectRegistration

# backslash is a path separator to browsers; "@" would introduce userinfo
_WILDCARD = r"[^/?#\\@\s\x00-\x1f\x7f]*?"


def construct_wildcard(pattern: str) -> re.Pattern[str]:
    parts = pattern.split("*")
    return re.compile(_WILDCARD.join(re.escape(part) for part in parts))


def construct_wildcards(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    return [construct_wildcard(p) for p in patterns if p]


def matches(wildcards: Iterable[re.Pattern[str]], candidate: str) -> bool:
    return any(w.fullmatch(candidate) for w in wildcards)


class RedirectResolver:
    def __init__(self, default_redirect: str) -> None:
        self._default = default_redirect

    @property
    def default_redirect(self) -> str:
        return self._default

    def resolve(
        self, candidate: str | None, registration: RedirectRegistration | None
    ) -> str:
        if registration is None:
            return self._default

        if candidate:
            wildcards = construct_wildcards(registration.redirect_uris)
            if matches(wildcards, candidate):
                return candidate

        return registration.signup_redirect_url or self._default
