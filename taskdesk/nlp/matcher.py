from collections.abc import Sequence
from typing import NamedTuple


class Entity(NamedTuple):
    id: str
    name: str


def match_entity(token: str, entities: Sequence[Entity]) -> str | None:
    """
    Fuzzy name lookup: exact -> prefix -> substring, case-insensitive.
    Within a level the first entity in list order wins.
    """
    q = token.strip().lower()
    if not q:
        return None

    names = [(e.id, e.name.lower()) for e in entities]
    for test in (str.__eq__, str.startswith, str.__contains__):
        for entity_id, name in names:
            if test(name, q):
                return entity_id
    return None
