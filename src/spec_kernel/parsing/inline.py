"""Inline markup handling for step and heading text.

Only a small subset is understood:

- backtick spans are kept verbatim (backticks included) so step patterns can
  match quoted values
- emphasis is unwrapped and marks the step as forced
- links and strike-through collapse to their text
- ``<identifier>`` tokens are collected as table parameters
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_CODE_SPAN_RE = re.compile(r"(?<!\\)(`+)(.+?)(?<!`)\1(?!`)", re.DOTALL)
_STAR_EMPHASIS_RE = re.compile(r"(?<!\\)(\*{1,3})(?=\S)(.+?)(?<=[^\s\\])\1")
_UNDERSCORE_EMPHASIS_RE = re.compile(r"(?<![\w\\])(_{1,3})(?=\S)(.+?)(?<=[^\s\\])\1(?!\w)")
_STRIKE_RE = re.compile(r"(?<!\\)~~(?=\S)(.+?)(?<=\S)~~")
_LINK_RE = re.compile(r"(?<!\\)!?\[([^\]]*)\]\([^)]*\)")
_ESCAPE_RE = re.compile(r"\\([\\`*_{}\[\]()#+\-.!|~])")

PARAM_RE = re.compile(r"<[A-Za-z_][A-Za-z0-9_]*>")


@dataclass(frozen=True, slots=True)
class InlineText:
    text: str
    params: tuple[str, ...]
    force: bool


def param_name(token: str) -> str:
    # "<name>" -> "name"
    return token.removeprefix("<").removesuffix(">")


def parse_inline(raw: str) -> InlineText:
    parts: list[str] = []
    params: list[str] = []
    force = False
    pos = 0
    for match in _CODE_SPAN_RE.finditer(raw):
        plain, emphasised = _render_plain(raw[pos : match.start()], params)
        parts.append(plain)
        force = force or emphasised
        parts.append(match.group(0))
        pos = match.end()
    plain, emphasised = _render_plain(raw[pos:], params)
    parts.append(plain)
    force = force or emphasised
    return InlineText(text="".join(parts).strip(), params=tuple(params), force=force)


def _render_plain(segment: str, params: list[str]) -> tuple[str, bool]:
    emphasised = False
    while True:
        updated = _STAR_EMPHASIS_RE.sub(r"\2", segment)
        updated = _UNDERSCORE_EMPHASIS_RE.sub(r"\2", updated)
        if updated == segment:
            break
        emphasised = True
        segment = updated
    segment = _STRIKE_RE.sub(r"\1", segment)
    segment = _LINK_RE.sub(r"\1", segment)
    segment = _ESCAPE_RE.sub(r"\1", segment)
    for token in PARAM_RE.findall(segment):
        if token not in params:
            params.append(token)
    return segment, emphasised
