"""Recover structured documents from generated text.

Generated analyses arrive as JSON text that is often wrapped in code fences
or cut off mid-document by an output-length limit. Recovery only ever drops a
trailing incomplete clause or appends closing tokens; it never rewrites
interior content, so a recovered document is always a prefix of what the
generator meant to send.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from ..errors import RecoveryFailed
from ..logging_utils import get_logger

logger = get_logger(__name__)

_FENCE_OPEN = re.compile(r"^```[\w-]*[ \t]*\r?\n?")
_FENCE_CLOSE = re.compile(r"\r?\n?```\s*$")
_SCALAR = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?|true|false|null")
_HEX = set("0123456789abcdefABCDEF")
_PAIRS = {"{": "}", "[": "]"}


class ScanState(Enum):
    NORMAL = "normal"
    IN_STRING = "in_string"
    ESCAPED = "escaped"


class Token(Enum):
    NONE = "none"
    OPEN = "open"
    CLOSE = "close"
    COLON = "colon"
    COMMA = "comma"
    KEY = "key"
    STRING = "string"
    SCALAR = "scalar"


@dataclass
class Container:
    opener: str
    position: int
    last_comma: Optional[int] = None

    @property
    def cut_point(self) -> int:
        """Where to cut to drop the trailing incomplete clause of this container."""
        return self.last_comma if self.last_comma is not None else self.position + 1


@dataclass
class RecoveryState:
    """Scanner state for one pass over the text. Never shared between calls."""

    state: ScanState = ScanState.NORMAL
    stack: List[Container] = field(default_factory=list)
    expect_key: bool = False
    string_is_key: bool = False
    escape_start: int = -1
    hex_remaining: int = 0
    last_token: Token = Token.NONE
    scalar_start: int = -1
    root_end: Optional[int] = None

    @property
    def brace_depth(self) -> int:
        return sum(1 for c in self.stack if c.opener == "{")

    @property
    def bracket_depth(self) -> int:
        return sum(1 for c in self.stack if c.opener == "[")

    @property
    def in_string(self) -> bool:
        return self.state is not ScanState.NORMAL

    def _in_object(self) -> bool:
        return bool(self.stack) and self.stack[-1].opener == "{"

    def feed(self, i: int, ch: str) -> None:
        if self.state is ScanState.ESCAPED:
            self.state = ScanState.IN_STRING
            self.hex_remaining = 4 if ch == "u" else 0
            return

        if self.state is ScanState.IN_STRING:
            if self.hex_remaining:
                self.hex_remaining = self.hex_remaining - 1 if ch in _HEX else 0
                if ch in _HEX:
                    return
            if ch == "\\":
                self.state = ScanState.ESCAPED
                self.escape_start = i
            elif ch == '"':
                self.state = ScanState.NORMAL
                self.last_token = Token.KEY if self.string_is_key else Token.STRING
            return

        if ch.isspace():
            return
        if ch == '"':
            self.state = ScanState.IN_STRING
            self.string_is_key = self._in_object() and self.expect_key
            self.expect_key = False
        elif ch in _PAIRS:
            self.stack.append(Container(ch, i))
            self.expect_key = ch == "{"
            self.last_token = Token.OPEN
        elif ch in "}]":
            if self.stack:
                self.stack.pop()
            self.expect_key = False
            self.last_token = Token.CLOSE
            if not self.stack:
                self.root_end = i + 1
        elif ch == ":":
            self.expect_key = False
            self.last_token = Token.COLON
        elif ch == ",":
            if self.stack:
                self.stack[-1].last_comma = i
            self.expect_key = self._in_object()
            self.last_token = Token.COMMA
        else:
            if self.last_token is not Token.SCALAR:
                self.scalar_start = i
            self.last_token = Token.SCALAR


def scan(text: str) -> RecoveryState:
    """Run the scanner over ``text``, stopping once the root container closes."""
    st = RecoveryState()
    for i, ch in enumerate(text):
        st.feed(i, ch)
        if st.root_end is not None:
            break
    return st


def strip_fences(text: str) -> str:
    """Remove a leading ```lang fence and a trailing ``` fence, plus surrounding whitespace."""
    out = text.strip()
    out = _FENCE_OPEN.sub("", out, count=1)
    out = _FENCE_CLOSE.sub("", out, count=1)
    return out.strip()


def _root_start(text: str) -> int:
    positions = [p for p in (text.find("{"), text.find("[")) if p >= 0]
    return min(positions) if positions else -1


def _tail_incomplete(text: str, st: RecoveryState, settled: int) -> bool:
    """
    True when the text does not end on a complete value.

    ``settled`` is the length of the prefix known to have been followed by a
    delimiter in the input. A scalar running to the end of the text past that
    point may have been cut short (``7`` of ``72``, ``tru``) and is dropped.
    """
    if st.last_token in (Token.COLON, Token.COMMA, Token.KEY):
        return True
    if st.last_token is Token.SCALAR:
        if st._in_object() and st.expect_key:
            return True
        if len(text) > settled:
            return True
        return _SCALAR.fullmatch(text[st.scalar_start:]) is None
    return False


def repair_json_text(text: str) -> str:
    """Return the repaired document text for ``text`` without parsing it.

    Raises RecoveryFailed when no container root is present.
    """
    body = strip_fences(text)
    start = _root_start(body)
    if start < 0:
        raise RecoveryFailed(text, body, "no object or array found")
    body = body[start:]
    # whitespace or a closing fence after the body delimits a trailing scalar
    settled = len(body) if not text.endswith(body) else 0

    while True:
        st = scan(body)
        if st.root_end is not None:
            return body[: st.root_end]

        if st.in_string:
            if st.string_is_key:
                body = body[: st.stack[-1].cut_point].rstrip()
                settled = len(body)
                continue
            if st.state is ScanState.ESCAPED or st.hex_remaining:
                body = body[: st.escape_start]
            body += '"'
            continue

        if _tail_incomplete(body, st, settled):
            cut = st.stack[-1].cut_point
            if cut >= len(body):
                raise RecoveryFailed(text, body, "truncation made no progress")
            body = body[:cut].rstrip()
            settled = len(body)
            continue

        closers = "".join(_PAIRS[c.opener] for c in reversed(st.stack))
        return body + closers


@dataclass(frozen=True)
class RecoveredDocument:
    data: Any
    text: str
    repaired: bool


def recover_document(raw: str) -> RecoveredDocument:
    """Parse generated text into a document, repairing truncation if needed.

    Well-formed input is returned unchanged. Otherwise the text is repaired
    (fences stripped, surrounding prose dropped, the trailing incomplete clause
    truncated, open strings and containers closed) and parsed again.
    """
    stripped = strip_fences(raw)
    try:
        return RecoveredDocument(json.loads(stripped), stripped, False)
    except json.JSONDecodeError:
        pass

    try:
        repaired = repair_json_text(raw)
    except RecoveryFailed as err:
        logger.error(
            "recovery failed",
            extra={"context": {"reason": err.reason, "raw_len": len(raw)}},
        )
        raise

    try:
        data = json.loads(repaired)
    except json.JSONDecodeError as err:
        logger.error(
            "recovery failed",
            extra={"context": {"reason": str(err), "raw_len": len(raw), "repaired_len": len(repaired)}},
        )
        raise RecoveryFailed(raw, repaired, str(err)) from err

    logger.warning(
        "recovered truncated document",
        extra={"context": {"raw_len": len(raw), "repaired_len": len(repaired)}},
    )
    return RecoveredDocument(data, repaired, True)
