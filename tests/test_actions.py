from datetime import date

from taskdesk.nlp.actions import create_action

TODAY = "2026-02-23"


def test_task_views():
    assert create_action("inbox", None, TODAY) == {"type": "task"}
    assert create_action("today", None, TODAY) == {"type": "task", "defaults": {"when_date": TODAY}}
    assert create_action("today", None, date(2026, 2, 23)) == {"type": "task", "defaults": {"when_date": TODAY}}
    for view in ("upcoming", "anytime", "someday"):
        assert create_action(view, None, TODAY) == {"type": "task", "defaults": {"status": view}}


def test_projects_view_depends_on_selection():
    assert create_action("projects", None, TODAY) == {"type": "project"}
    assert create_action("projects", "proj-1", TODAY) == {"type": "task", "defaults": {"project_id": "proj-1"}}


def test_other_views():
    assert create_action("notes", None, TODAY) == {"type": "note"}
    assert create_action("stakeholders", None, TODAY) == {"type": "stakeholder"}
    assert create_action("logbook", None, TODAY) == {"type": "none"}
