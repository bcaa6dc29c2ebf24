"""Best-effort extraction of JSON values from free-form model text.

Language models asked for JSON often wrap it in prose or code fences. These
helpers locate the first balanced ``{...}`` or ``[...]`` span that parses,
and report failure as a value rather than an exception.
"""

import json
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Extraction:
    """Result of an extraction attempt: a parsed value, or the failure reason."""

    ok: bool
    value: Any = None
    error: str | None = None
    raw: str = ""


def balanced_spans(text: str, open_char: str, close_char: str) -> Iterator[str]:
    """Yield each balanced span starting at successive ``open_char`` positions.

    Brackets inside JSON string literals are ignored. Starts that never close
    are skipped.
    """
    start = text.find(open_char)
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == open_char:
                depth += 1
            elif char == close_char:
                depth -= 1
                if depth == 0:
                    yield text[start : index + 1]
                    break
        start = text.find(open_char, start + 1)


def _extract(
    text: str,
    open_char: str,
    close_char: str,
    kind: type,
    accept: Callable[[Any], bool] | None = None,
) -> Extraction:
    for span in balanced_spans(text or "", open_char, close_char):
        try:
            value = json.loads(span)
        except ValueError:
            continue
        if isinstance(value, kind) and (accept is None or accept(value)):
            return Extraction(ok=True, value=value, raw=text)
    name = "object" if kind is dict else "array"
    return Extraction(ok=False, error=f"No valid JSON {name} found", raw=text)


def extract_json_object(text: str) -> Extraction:
    """Extract the first balanced ``{...}`` span that parses as a JSON object."""
    return _extract(text, "{", "}", dict)


def extract_json_array(
    text: str, accept: Callable[[list], bool] | None = None
) -> Extraction:
    """Extract the first balanced ``[...]`` span that parses as a JSON array.

    When ``accept`` is given, arrays it rejects are skipped, so a citation
    marker such as ``[1]`` does not hide a later list.
    """
    return _extract(text, "[", "]", list, accept)
