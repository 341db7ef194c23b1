"""Opaque correlation ids for chat sessions and anonymous users.

These are not security tokens, so plain ``random`` is enough. The millisecond
prefix keeps ids roughly sortable and the random suffix keeps concurrent
callers apart.
"""

import random
import string
import time

_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LENGTH = 9


def _make_id(prefix: str) -> str:
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_ALPHABET, k=_SUFFIX_LENGTH))
    return f"{prefix}_{millis}_{suffix}"


def new_session_id() -> str:
    return _make_id("session")


def new_user_id() -> str:
    return _make_id("user")
