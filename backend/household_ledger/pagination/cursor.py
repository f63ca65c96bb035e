"""Opaque cursor tokens for keyset pagination.

A cursor is the base64 form of a row id written as a decimal string, so
``IdCursorCodec().encode(42) == "NDI="``. Clients must treat it as opaque;
swapping the codec (e.g. to carry a secondary sort key) does not change the
pager.
"""

import base64
import binascii
import re
from typing import Protocol

from household_ledger.core.errors import InvalidCursorError

_DIGITS_RE = re.compile(r"[0-9]{1,19}")
MAX_ROW_ID = 2**63 - 1


class CursorCodec(Protocol):
    def encode(self, row_id: int) -> str: ...

    def decode(self, cursor: str) -> int: ...


class IdCursorCodec:
    def encode(self, row_id: int) -> str:
        if isinstance(row_id, bool) or not isinstance(row_id, int) or row_id < 1:
            raise ValueError(f"cursor ids must be positive integers, got {row_id!r}")
        return base64.b64encode(str(row_id).encode("utf-8")).decode("ascii")

    def decode(self, cursor: str) -> int:
        if not isinstance(cursor, str) or not cursor.strip():
            raise InvalidCursorError(cursor, "empty cursor")
        try:
            raw = base64.b64decode(cursor.encode("ascii"), validate=True)
            text = raw.decode("utf-8")
        except (binascii.Error, UnicodeError, ValueError):
            raise InvalidCursorError(cursor, "not base64 encoded")
        if not _DIGITS_RE.fullmatch(text):
            raise InvalidCursorError(cursor, "cursor does not reference a row id")
        row_id = int(text)
        if row_id < 1 or row_id > MAX_ROW_ID:
            raise InvalidCursorError(cursor, "cursor does not reference a row id")
        # Leading zeros or stray padding bits would give one id several tokens.
        if self.encode(row_id) != cursor:
            raise InvalidCursorError(cursor, "cursor is not in canonical form")
        return row_id

    def is_valid(self, cursor: str) -> bool:
        try:
            self.decode(cursor)
        except InvalidCursorError:
            return False
        return True


default_codec = IdCursorCodec()


def encode_cursor(row_id: int) -> str:
    return default_codec.encode(row_id)


def decode_cursor(cursor: str) -> int:
    return default_codec.decode(cursor)
