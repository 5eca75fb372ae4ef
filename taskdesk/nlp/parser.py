from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import date, datetime

from .dates import resolve_date
from .matcher import Entity, match_entity

logger = logging.getLogger(__name__)

# Tokens must sit at start of text or right after whitespace ("C#Work" is not a tag)
CONTEXT_PAT = re.compile(r"(?<!\S)#(\S+)")
PROJECT_PAT = re.compile(r"(?<!\S)\+(\S+)")
# Date tokens may borrow the following word ("due:mar 15"), whatever whitespace separates it
WHEN_PAT = re.compile(r"(?<!\S)do:(\S+)(?:\s+(\S+))?")
DEADLINE_PAT = re.compile(r"(?<!\S)due:(\S+)(?:\s+(\S+))?")

GAP_PAT = re.compile(r"\s{2,}")


def _find_token(pattern: re.Pattern, text: str) -> tuple[str, tuple[int, int]] | None:
    m = pattern.search(text)
    if not m:
        return None
    return m.group(1), (m.start(), m.end(1))


def _find_date_token(
    pattern: re.Pattern, text: str, now: datetime | date
) -> tuple[str, tuple[int, int], str | None] | None:
    m = pattern.search(text)
    if not m:
        return None
    value, end = m.group(1), m.end(1)
    resolved = resolve_date(value, now)
    extra = m.group(2)
    if extra and resolved is None:
        combined = f"{value} {extra}"
        resolved = resolve_date(combined, now)
        if resolved is not None:
            value, end = combined, m.end(2)
    return value, (m.start(), end), resolved


def _strip_spans(text: str, spans: list[tuple[int, int]]) -> str:
    if not spans:
        return text.strip()
    pieces = []
    pos = 0
    for start, end in sorted(spans):
        pieces.append(text[pos:start])
        pos = end
    pieces.append(text[pos:])
    return GAP_PAT.sub(" ", " ".join(pieces)).strip()


def parse_task_input(
    text: str,
    contexts: Sequence[Entity],
    projects: Sequence[Entity],
    now: datetime | date,
) -> dict:
    """
    Quick-entry parser:
    - #context and +project, fuzzy-matched against the given entities
    - do:<date> (when) and due:<date> (deadline), resolved against `now`
    - first token of each kind wins; later ones stay in the title
    - unresolved tokens keep their typed text under "raw"
    """
    if not text or not text.strip():
        return {"title": "", "raw": {}}

    found = {
        "context": _find_token(CONTEXT_PAT, text),
        "project": _find_token(PROJECT_PAT, text),
        "when_date": _find_date_token(WHEN_PAT, text, now),
        "deadline": _find_date_token(DEADLINE_PAT, text, now),
    }
    raw = {kind: hit[0] for kind, hit in found.items() if hit}
    spans = [hit[1] for hit in found.values() if hit]

    result: dict = {"title": _strip_spans(text, spans), "raw": raw}

    if "context" in raw:
        context_id = match_entity(raw["context"], contexts)
        if context_id:
            result["context_id"] = context_id
    if "project" in raw:
        project_id = match_entity(raw["project"], projects)
        if project_id:
            result["project_id"] = project_id
    for kind in ("when_date", "deadline"):
        hit = found[kind]
        if hit and hit[2]:
            result[kind] = hit[2]

    unresolved = [k for k in raw if k not in result and f"{k}_id" not in result]
    if unresolved:
        logger.debug("Unresolved quick-entry tokens: %s", {k: raw[k] for k in unresolved})

    return result
