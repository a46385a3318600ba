"""
Best-effort repair of language-model output into JSON.

Models wrap payloads in code fences, add prose around them, use single
quotes, leave keys bare or trailing commas behind. Each step below is a pure
str -> str transform; REPAIR_STEPS runs them in a fixed order before parsing.
"""
import json
import re
from typing import Any, Callable, List

_FENCE_OPEN = re.compile(r"^\s*```[A-Za-z]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```\s*$")
_ARRAY_OF_OBJECTS = re.compile(r"\[\s*\{[\s\S]*\}\s*\]")

# double- or single-quoted literal, escapes honoured
_LITERAL = re.compile(r"\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*'", re.DOTALL)
_TRAILING_COMMA = re.compile(r",\s*([\]}])")
_BARE_KEY = re.compile(r"([{,]\s*)([A-Za-z_$][\w$]*)(\s*:)")


class MalformedResponse(ValueError):
    """No JSON payload could be recovered from the model output."""


def _outside_literals(text: str, fn: Callable[[str], str]) -> str:
    """Apply fn to the stretches of text that are not string literals."""
    out, pos = [], 0
    for m in _LITERAL.finditer(text):
        out.append(fn(text[pos:m.start()]))
        out.append(m.group(0))
        pos = m.end()
    out.append(fn(text[pos:]))
    return "".join(out)


def strip_code_fences(text: str) -> str:
    t = (text or "").strip()
    t = _FENCE_OPEN.sub("", t)
    return _FENCE_CLOSE.sub("", t).strip()


def extract_json_array(text: str) -> str:
    m = _ARRAY_OF_OBJECTS.search(text or "")
    if m:
        return m.group(0)
    start, end = text.find("["), text.rfind("]")
    if start == -1 or end <= start:
        raise MalformedResponse("no JSON array in model output")
    return text[start:end + 1]


def extract_json_object(text: str) -> str:
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        raise MalformedResponse("no JSON object in model output")
    return text[start:end + 1]


def remove_trailing_commas(text: str) -> str:
    return _outside_literals(text, lambda s: _TRAILING_COMMA.sub(r"\1", s))


def normalize_quotes(text: str) -> str:
    """Rewrite 'single-quoted' literals as "double-quoted" ones."""
    def convert(m):
        lit = m.group(0)
        if lit[0] == '"':
            return lit
        body = lit[1:-1].replace("\\'", "'")
        body = re.sub(r'(?<!\\)"', '\\"', body)
        return '"' + body + '"'
    return _LITERAL.sub(convert, text)


def quote_bare_keys(text: str) -> str:
    return _outside_literals(text, lambda s: _BARE_KEY.sub(r'\1"\2"\3', s))


def unwrap_stray_quotes(text: str) -> str:
    t = text.strip()
    if len(t) >= 2 and t[0] == t[-1] and t[0] in "\"'" and t[1:-1].lstrip()[:1] in ("[", "{"):
        return t[1:-1].strip()
    return t


REPAIR_STEPS: List[Callable[[str], str]] = [
    remove_trailing_commas,
    normalize_quotes,
    quote_bare_keys,
    unwrap_stray_quotes,
]


def repair(payload: str) -> str:
    for step in REPAIR_STEPS:
        payload = step(payload)
    return payload


def _loads(payload: str) -> Any:
    try:
        return json.loads(payload)
    except (ValueError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder's stack allows
        raise MalformedResponse(f"unparseable JSON: {e}") from e


def decode_string_payload(text: str) -> str:
    """A payload sent as a JSON-encoded string ("[{\\"q\\": ...}]") is decoded once."""
    t = text.strip()
    if not t.startswith('"'):
        return t
    try:
        inner = json.loads(t)
    except ValueError:
        return t
    return inner.strip() if isinstance(inner, str) else t


def _prepare(raw: str) -> str:
    return unwrap_stray_quotes(decode_string_payload(strip_code_fences(raw)))


def parse_quiz_response(raw: str) -> list:
    """Fence-strip, locate the array, repair and parse it; MalformedResponse on failure."""
    data = _loads(repair(extract_json_array(_prepare(raw))))
    if not isinstance(data, list):
        raise MalformedResponse("model output is not a JSON array")
    return data


def parse_json_object(raw: str) -> dict:
    data = _loads(repair(extract_json_object(_prepare(raw))))
    if not isinstance(data, dict):
        raise MalformedResponse("model output is not a JSON object")
    return data
