"""CI annotation stream decoding.

One annotation per line::

    ::error title=lint/suspicious/noDebugger,file=main.js,line=1,endLine=1,col=1,endColumn=9::This is an unexpected use of the debugger statement.

Message text escapes ``%``, CR and LF; property values additionally
escape ``:`` and ``,``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

ANNOTATION_RE = re.compile(r"^::(?P<severity>[A-Za-z]+)(?: (?P<props>[^:]*))?::(?P<message>.*)$")

MESSAGE_ESCAPES = (("%0D", "\r"), ("%0A", "\n"), ("%25", "%"))
PROPERTY_ESCAPES = (("%0D", "\r"), ("%0A", "\n"), ("%3A", ":"), ("%2C", ","), ("%25", "%"))


@dataclass
class Annotation:
    severity: str
    message: str
    properties: dict[str, str] = field(default_factory=dict)

    def get_int(self, name: str) -> int | None:
        value = self.properties.get(name)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None


def _unescape(value: str, escapes: tuple[tuple[str, str], ...]) -> str:
    # %25 goes last so that "%253A" stays "%3A"
    for code, char in escapes:
        value = value.replace(code, char)
    return value


def unescape_message(value: str) -> str:
    return _unescape(value, MESSAGE_ESCAPES)


def unescape_property(value: str) -> str:
    return _unescape(value, PROPERTY_ESCAPES)


def parse_annotation(line: str) -> Annotation | None:
    m = ANNOTATION_RE.match(line.rstrip("\r"))
    if not m:
        return None

    props: dict[str, str] = {}
    for pair in (m.group("props") or "").split(","):
        key, sep, value = pair.partition("=")
        if sep:
            props[key.strip()] = unescape_property(value)

    return Annotation(
        severity=m.group("severity").lower(),
        message=unescape_message(m.group("message")),
        properties=props,
    )


def parse_annotations(text: str) -> list[Annotation]:
    out: list[Annotation] = []
    for line in text.splitlines():
        a = parse_annotation(line)
        if a is not None:
            out.append(a)
    return out
