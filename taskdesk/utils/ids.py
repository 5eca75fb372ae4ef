from uuid import uuid4


def new_id() -> str:
    """Random opaque id for contexts, projects and tasks."""
    return uuid4().hex
