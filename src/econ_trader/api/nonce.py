"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Request nonce scheme.

Each request carries a random request key, a millisecond timestamp and a
nonce: a short random string whose md5 digest over
``"<nonce>.<timestamp>.<request_key>"`` ends with the request key's mark
character. This is request tagging, not a security boundary.
"""

from __future__ import annotations

import hashlib
import random
import string
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass

UNIQ_HEADER = "X-UNIQ"
TIMESTAMP_HEADER = "X-TIMESTAMP"
NONCE_HEADER = "X-NONCE"

MAX_ATTEMPTS = 1000
MARK_INDEX = 9
CANDIDATE_LENGTH = 13
_CANDIDATE_ALPHABET = string.digits + string.ascii_lowercase

Hasher = Callable[[str], str]


def md5_hex(value: str) -> str:
    return hashlib.md5(value.encode("utf-8"), usedforsecurity=False).hexdigest()


def new_request_key() -> str:
    return uuid.uuid4().hex[:16]


def current_timestamp() -> str:
    return str(int(time.time() * 1000))


def get_mark(request_key: str) -> str:
    return request_key[MARK_INDEX : MARK_INDEX + 1]


def _candidate(rng: random.Random) -> str:
    return "".join(rng.choices(_CANDIDATE_ALPHABET, k=CANDIDATE_LENGTH))


def generate_nonce(
    timestamp: str,
    request_key: str,
    *,
    hasher: Hasher = md5_hex,
    max_attempts: int = MAX_ATTEMPTS,
    rng: random.Random | None = None,
) -> str:
    """Search for a matching nonce; returns ``""`` once ``max_attempts`` are spent."""
    mark = get_mark(request_key)
    source = rng or random.Random()
    for _ in range(max_attempts):
        candidate = _candidate(source)
        if hasher(f"{candidate}.{timestamp}.{request_key}").endswith(mark):
            return candidate
    return ""


def verify_nonce(
    nonce: str,
    timestamp: str,
    request_key: str,
    *,
    hasher: Hasher = md5_hex,
) -> bool:
    """Server-side check mirroring ``generate_nonce``."""
    if not nonce or not request_key:
        return False
    return hasher(f"{nonce}.{timestamp}.{request_key}").endswith(get_mark(request_key))


@dataclass(frozen=True, slots=True)
class NonceGenerator:
    """Builds the nonce header triple for one outbound request."""

    hasher: Hasher = md5_hex
    max_attempts: int = MAX_ATTEMPTS

    def headers(self) -> dict[str, str]:
        request_key = new_request_key()
        timestamp = current_timestamp()
        headers = {UNIQ_HEADER: request_key, TIMESTAMP_HEADER: timestamp}
        nonce = generate_nonce(
            timestamp,
            request_key,
            hasher=self.hasher,
            max_attempts=self.max_attempts,
        )
        if nonce:
            headers[NONCE_HEADER] = nonce
        return headers
