# shoescrape/pipeline/payload.py
"""
Finds JSON-like blobs embedded in script text and decodes them.

Retailer pages ship their variant data as object literals assigned to a
JavaScript variable or passed to a constructor, e.g.

    var styles = {"314192": ["...", ...]};
    var spConfig = new Product.Config({"attributes": {...}});

Nothing here knows what the decoded fields mean; callers index the values.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import json5

logger = logging.getLogger(__name__)

Payload = Dict[str, List[Any]]

_CLOSERS = {"{": "}", "[": "]"}


@dataclass
class ParseFailure:
    """Returned instead of a payload. `raw` is the slice that was being decoded."""
    reason: str
    raw: str = ""
    error: Optional[Exception] = None

    def __str__(self) -> str:
        if self.error is not None:
            return f"{self.reason}: {self.error}"
        return self.reason


def find_balanced_end(text: str, start: int) -> int:
    """
    Returns the index just past the bracket that closes the one at `start`,
    or -1 if it is never closed. Brackets inside string literals are ignored.
    """
    opener = text[start]
    closer = _CLOSERS[opener]
    depth = 0
    quote = None
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in ("\"", "'"):
            quote = char
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return index + 1
    return -1


def slice_payload(raw_text: str, start_sentinel: Optional[str] = None, end_sentinel: Optional[str] = None,
                  brace_balanced: bool = True) -> Union[str, ParseFailure]:
    """Cuts the payload text out of `raw_text` without decoding it."""
    start = 0
    if start_sentinel:
        start = raw_text.find(start_sentinel)
        if start == -1:
            return ParseFailure(f"start sentinel {start_sentinel!r} not found")
        start += len(start_sentinel)

    if brace_balanced:
        candidates = [i for i in (raw_text.find("{", start), raw_text.find("[", start)) if i != -1]
        if not candidates:
            return ParseFailure("no opening bracket after start sentinel", raw_text[start:start + 200])
        open_index = min(candidates)
        end = find_balanced_end(raw_text, open_index)
        if end == -1:
            return ParseFailure("payload is never closed", raw_text[open_index:])
        return raw_text[open_index:end]

    if end_sentinel:
        end = raw_text.find(end_sentinel, start)
        if end == -1:
            return ParseFailure(f"end sentinel {end_sentinel!r} not found", raw_text[start:start + 200])
        return raw_text[start:end].strip()
    return raw_text[start:].strip()


def as_list(value: Any) -> List[Any]:
    """Lists and tuples become lists, anything else is wrapped so it can be indexed with [0]."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def normalize_payload(decoded: Any) -> Union[Payload, ParseFailure]:
    """Gives a decoded object or array the uniform str -> list shape."""
    if isinstance(decoded, dict):
        return {str(key): as_list(value) for key, value in decoded.items()}
    if isinstance(decoded, list):
        return {str(index): as_list(value) for index, value in enumerate(decoded)}
    return ParseFailure(f"payload is a {type(decoded).__name__}, not an object or array")


def decode_payload(json_string: str) -> Union[Payload, ParseFailure]:
    """Strict JSON first; JavaScript object literals (single quotes, bare keys) go through json5."""
    try:
        decoded = json.loads(json_string)
    except json.JSONDecodeError:
        try:
            decoded = json5.loads(json_string)
        except ValueError as e:
            # json5 reports decode problems as ValueError subclasses
            return ParseFailure("cannot decode payload", json_string, e)

    result = normalize_payload(decoded)
    if isinstance(result, ParseFailure):
        result.raw = json_string
    return result


def find_embedded_payload(raw_text: str, start_sentinel: Optional[str] = None, end_sentinel: Optional[str] = None,
                          brace_balanced: bool = True) -> Union[Payload, ParseFailure]:
    """
    Locates and decodes an embedded payload. Never raises: every problem comes
    back as a ParseFailure so the caller decides whether it matters.

    Args:
        raw_text: The text the payload is embedded in (usually a script body).
        start_sentinel: Text right before the payload. Searching starts at the beginning when None.
        end_sentinel: Text right after the payload, used when brace_balanced is False.
        brace_balanced: End the payload at the bracket matching the first opening one.
    """
    if not raw_text:
        return ParseFailure("no text to search")

    json_string = slice_payload(raw_text, start_sentinel, end_sentinel, brace_balanced)
    if isinstance(json_string, ParseFailure):
        logger.debug("Payload not located: %s", json_string)
        return json_string

    logger.debug("Extracted potential JSON string (first 200 chars): %s", json_string[:200])
    result = decode_payload(json_string)
    if isinstance(result, ParseFailure):
        logger.debug("Failed to decode payload: %s", result)
    return result
