import re
from datetime import datetime

from taskdesk.nlp.dates import resolve_date
from taskdesk.nlp.matcher import Entity
from taskdesk.nlp.parser import parse_task_input

# Friday
NOW = datetime(2026, 2, 20, 12, 0, 0)

CONTEXTS = [Entity("ctx-1", "Work"), Entity("ctx-2", "Personal")]
PROJECTS = [Entity("proj-1", "Cortex"), Entity("proj-2", "Website")]


def parse(text):
    return parse_task_input(text, CONTEXTS, PROJECTS, NOW)


def test_parser_extracts_all_tokens():
    r = parse("Task #Work +Cortex do:tomorrow due:friday")
    assert r == {
        "title": "Task",
        "context_id": "ctx-1",
        "project_id": "proj-1",
        "when_date": "2026-02-21",
        "deadline": "2026-02-27",
        "raw": {"context": "Work", "project": "Cortex", "when_date": "tomorrow", "deadline": "friday"},
    }


def test_context_token_positions():
    for text, title in [
        ("Task #Work", "Task"),
        ("#Work do my task", "do my task"),
        ("my task #Work", "my task"),
        ("my #Work task", "my task"),
    ]:
        r = parse(text)
        assert r["title"] == title
        assert r["context_id"] == "ctx-1"
        assert r["raw"]["context"] == "Work"


def test_glued_markers_are_not_tokens():
    r = parse("C#Work")
    assert r == {"title": "C#Work", "raw": {}}

    r = parse("learn C++ and a+b")
    assert r["title"] == "learn C++ and a+b"
    assert "project" not in r["raw"]

    r = parse("undo:tomorrow")
    assert r["title"] == "undo:tomorrow"
    assert r["raw"] == {}


def test_bare_marker_is_left_alone():
    r = parse("Task # done")
    assert r == {"title": "Task # done", "raw": {}}


def test_fuzzy_context_and_project():
    assert parse("Task #wo")["context_id"] == "ctx-1"
    assert parse("Task #ers")["context_id"] == "ctx-2"
    assert parse("Task #WORK")["context_id"] == "ctx-1"
    assert parse("Task +cor")["project_id"] == "proj-1"
    assert parse("Task +site")["project_id"] == "proj-2"
    assert parse("Task +CORTEX")["project_id"] == "proj-1"


def test_unmatched_names_keep_raw_text():
    r = parse("Task #nonexistent +nothing")
    assert r["title"] == "Task"
    assert "context_id" not in r
    assert "project_id" not in r
    assert r["raw"] == {"context": "nonexistent", "project": "nothing"}


def test_when_and_deadline_tokens():
    r = parse("Task do:mon")
    assert r["when_date"] == "2026-02-23"
    assert r["raw"]["when_date"] == "mon"

    r = parse("Task do:3d")
    assert r["when_date"] == "2026-02-23"

    r = parse("Task due:2026-03-15")
    assert r["deadline"] == "2026-03-15"
    assert r["raw"]["deadline"] == "2026-03-15"


def test_unrecognised_dates_keep_raw_text():
    r = parse("Task do:foobar due:2026-13-01")
    assert r["title"] == "Task"
    assert "when_date" not in r
    assert "deadline" not in r
    assert r["raw"] == {"when_date": "foobar", "deadline": "2026-13-01"}


def test_date_token_takes_second_word_only_when_needed():
    r = parse("Task due:mar 15")
    assert r["title"] == "Task"
    assert r["deadline"] == "2026-03-15"
    assert r["raw"]["deadline"] == "mar 15"

    r = parse("Pay rent do:jan 10 #Personal")
    assert r["title"] == "Pay rent"
    assert r["when_date"] == "2027-01-10"
    assert r["context_id"] == "ctx-2"

    # first word resolves on its own
    r = parse("Task do:tomorrow 15 minutes")
    assert r["raw"]["when_date"] == "tomorrow"
    assert r["title"] == "Task 15 minutes"

    # combination does not resolve either
    r = parse("Task due:foo bar")
    assert r["raw"]["deadline"] == "foo"
    assert r["title"] == "Task bar"


def test_date_second_word_after_any_whitespace():
    for text in ("Task due:mar\t15", "Task due:mar  15", "Task due:mar \t 15 #Work"):
        r = parse(text)
        assert r["title"] == "Task"
        assert r["deadline"] == "2026-03-15"
        assert r["raw"]["deadline"] == "mar 15"


def test_each_date_word_is_resolved_once(monkeypatch):
    from taskdesk.nlp import parser

    calls = []

    def counting(token, now):
        calls.append(token)
        return resolve_date(token, now)

    monkeypatch.setattr(parser, "resolve_date", counting)
    r = parse("Task do:tomorrow due:mar 15")
    assert r["when_date"] == "2026-02-21"
    assert r["deadline"] == "2026-03-15"
    assert sorted(calls) == ["mar", "mar 15", "tomorrow"]


def test_name_tokens_never_take_second_word():
    r = parse("Task #mar 15")
    assert r["raw"]["context"] == "mar"
    assert r["title"] == "Task 15"


def test_first_token_of_a_kind_wins():
    r = parse("Task #Work #Personal")
    assert r["context_id"] == "ctx-1"
    assert r["raw"]["context"] == "Work"
    assert r["title"] == "Task #Personal"

    r = parse("Task due:mon due:tue")
    assert r["deadline"] == "2026-02-23"
    assert r["title"] == "Task due:tue"


def test_title_cleanup():
    r = parse("Do the thing #Work +Cortex")
    assert r["title"] == "Do the thing"

    r = parse("  My task  #Work  ")
    assert r["title"] == "My task"

    r = parse("Call\t#Work\tmom do:tom")
    assert r["title"] == "Call mom"

    for text in ["#Work a +Cortex b do:tom c due:fri", "a #Work b", "a b c #Work +Cortex"]:
        title = parse(text)["title"]
        assert not re.search(r"\s{2,}", title)
        assert title == title.strip()
        assert not re.search(r"(^|\s)(#|\+|do:|due:)\S", title)


def test_only_tokens_gives_empty_title():
    r = parse("#Work do:today")
    assert r["title"] == ""
    assert r["context_id"] == "ctx-1"
    assert r["when_date"] == "2026-02-20"


def test_empty_input():
    assert parse("") == {"title": "", "raw": {}}
    assert parse("   ") == {"title": "", "raw": {}}


def test_parser_handles_minimal_text():
    assert parse("Buy milk") == {"title": "Buy milk", "raw": {}}


def test_parser_is_pure():
    contexts = list(CONTEXTS)
    projects = list(PROJECTS)
    first = parse_task_input("Task #wo +site due:mar 15", contexts, projects, NOW)
    second = parse_task_input("Task #wo +site due:mar 15", contexts, projects, NOW)
    assert first == second
    assert contexts == CONTEXTS
    assert projects == PROJECTS
