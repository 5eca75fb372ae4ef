from __future__ import annotations

from datetime import date

STATUS_VIEWS = ("upcoming", "anytime", "someday")


def create_action(view: str, selected_project_id: str | None, today: date | str) -> dict:
    """What "new item" means in the given sidebar view, plus task defaults."""
    if view == "inbox":
        return {"type": "task"}
    if view == "today":
        today_iso = today.isoformat() if isinstance(today, date) else today
        return {"type": "task", "defaults": {"when_date": today_iso}}
    if view in STATUS_VIEWS:
        return {"type": "task", "defaults": {"status": view}}
    if view == "projects":
        if selected_project_id:
            return {"type": "task", "defaults": {"project_id": selected_project_id}}
        return {"type": "project"}
    if view == "notes":
        return {"type": "note"}
    if view == "stakeholders":
        return {"type": "stakeholder"}
    return {"type": "none"}
