"""
rxren.template

Replacement templates using `$` back-references:

  $1, ${1}         numbered group
  $name, ${name}   named group, `(?P<name>...)`
  $$               literal dollar sign

A reference name is taken as long as possible, so `$1x` refers to a group
called `1x`; write `${1}x` to follow group 1 with an `x`. References to groups
that do not exist, or that did not participate in the match, expand to the
empty string. A `$` that does not start a valid reference is kept literally.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Match, Pattern, Tuple

_REFERENCE_RE = re.compile(r"\$(?:(\$)|\{(\w+)\}|(\w+))")


@dataclass(frozen=True)
class GroupRef:
    name: str

    def resolve(self, match: Match[str]) -> str:
        if self.name.isdigit():
            index = int(self.name)
            if index > match.re.groups:
                return ""
            return match.group(index) or ""
        if self.name not in match.re.groupindex:
            return ""
        return match.group(self.name) or ""


class ReplacementTemplate:
    def __init__(self, template: str):
        self.source = template
        self.parts: Tuple[str | GroupRef, ...] = tuple(_parse(template))

    def expand(self, match: Match[str]) -> str:
        return "".join(
            part if isinstance(part, str) else part.resolve(match)
            for part in self.parts
        )

    def sub(self, pattern: Pattern[str], text: str) -> str:
        """
        Replace every non-overlapping match of `pattern` in `text`. An empty
        match that directly follows the previous match is skipped, so `a*`
        over "baaac" gives "-b-c-" rather than "-b--c-".
        """
        pieces: List[str] = []
        position = 0
        previous_end = -1
        for match in pattern.finditer(text):
            start, end = match.span()
            if start == end == previous_end:
                continue
            pieces.append(text[position:start])
            pieces.append(self.expand(match))
            position = previous_end = end
        pieces.append(text[position:])
        return "".join(pieces)

    def __repr__(self) -> str:
        return f"ReplacementTemplate({self.source!r})"


def _parse(template: str) -> List[str | GroupRef]:
    parts: List[str | GroupRef] = []
    literal = ""
    position = 0
    for found in _REFERENCE_RE.finditer(template):
        literal += template[position:found.start()]
        position = found.end()
        if found.group(1):
            literal += "$"
            continue
        if literal:
            parts.append(literal)
            literal = ""
        parts.append(GroupRef(found.group(2) or found.group(3)))
    literal += template[position:]
    if literal:
        parts.append(literal)
    return parts
