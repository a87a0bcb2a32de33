from notemark.config import NotemarkConfig
from notemark.models import CodeBlock, EditorMode, Highlighted, Paragraph, Status, Text
from notemark.overlay import MatchLocation
from notemark.session import EditorSession, PreviewTarget, find_first_highlighted_block
from notemark.parser import parse_markdown
from notemark.storage import MemoryStorage


class ManualScheduler:
    """Collects scheduled callbacks until the test runs them."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def run_all(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


def _session(notes=None, **kwargs) -> EditorSession:
    return EditorSession(MemoryStorage(notes or {}), **kwargs)


def test_session_starts_in_edit_mode():
    session = _session()

    assert session.mode is EditorMode.EDIT
    assert session.search == ""


def test_toggle_mode_focuses_editor_on_return():
    focused = []
    session = _session(focus=lambda: focused.append(True))

    assert session.toggle_mode() is EditorMode.PREVIEW
    assert focused == []

    assert session.toggle_mode() is EditorMode.EDIT
    assert focused == [True]


def test_set_mode_to_current_mode_does_nothing():
    focused = []
    session = _session(focus=lambda: focused.append(True))

    session.set_mode(EditorMode.EDIT)

    assert focused == []


def test_editing_never_switches_mode():
    session = _session()
    session.set_mode(EditorMode.PREVIEW)

    session.update_content("# changed")

    assert session.mode is EditorMode.PREVIEW


def test_render_reflects_current_text_and_search():
    session = _session()
    session.update_content("a cat")
    session.set_search("cat")

    assert session.render().blocks == (Paragraph([Text("a "), Highlighted("cat")]),)

    session.update_content("a dog")
    assert session.render().blocks == (Paragraph([Text("a dog")]),)


def test_empty_text_renders_configured_placeholder():
    session = _session(config=NotemarkConfig(empty_placeholder="Start typing"))

    assert session.render().blocks[0].text == "Start typing"


def test_search_navigates_in_edit_mode_after_settle_delay():
    scheduler = ManualScheduler()
    targets = []
    session = _session(scheduler=scheduler, scroll_into_view=targets.append)
    session.update_content("one\ntwo cat")

    session.set_search("cat")

    assert targets == []
    assert scheduler.pending[0][0] == 0.3
    scheduler.run_all()
    assert targets == [MatchLocation(offset=8, line=1, column=4, length=3)]


def test_search_navigates_to_block_in_preview_mode():
    targets = []
    session = _session(scroll_into_view=targets.append)
    session.update_content("# Intro\n\nthe cat sat")
    session.set_mode(EditorMode.PREVIEW)

    session.set_search("cat")

    assert targets == [PreviewTarget(2)]


def test_only_latest_search_is_navigated():
    scheduler = ManualScheduler()
    targets = []
    session = _session(scheduler=scheduler, scroll_into_view=targets.append)
    session.update_content("cat dog")

    session.set_search("cat")
    session.set_search("dog")
    scheduler.run_all()

    assert targets == [MatchLocation(offset=4, line=0, column=4, length=3)]


def test_clearing_search_cancels_pending_navigation():
    scheduler = ManualScheduler()
    targets = []
    session = _session(scheduler=scheduler, scroll_into_view=targets.append)
    session.update_content("cat")

    session.set_search("cat")
    session.set_search("")
    scheduler.run_all()

    assert targets == []
    assert session.first_match() is None


def test_unchanged_search_does_not_reschedule():
    scheduler = ManualScheduler()
    session = _session(scheduler=scheduler)

    session.set_search("cat")
    session.set_search("cat")

    assert len(scheduler.pending) == 1


def test_search_without_matches_does_not_scroll():
    targets = []
    session = _session(scroll_into_view=targets.append)
    session.update_content("nothing here")

    session.set_search("cat")

    assert targets == []


def test_find_first_highlighted_block_searches_tables_and_quotes():
    document = parse_markdown("plain\n| a |\n|---|\n| cat |\n> cat", "cat")

    assert find_first_highlighted_block(document) == PreviewTarget(1)


def test_find_first_highlighted_block_skips_code():
    document = parse_markdown("```\ncat\n```", "cat")

    assert find_first_highlighted_block(document) is None


def test_load_and_save_round_trip():
    storage = MemoryStorage({"a.md": "# A"})
    session = EditorSession(storage)

    assert session.load("a.md") is Status.ACK
    session.update_content("# B")

    assert session.save() is Status.ACK
    assert storage.notes["a.md"] == "# B"
    assert session.last_error is None


def test_failed_load_keeps_current_note():
    session = _session({"a.md": "# A"})
    session.load("a.md")

    assert session.load("missing.md") is Status.FAIL
    assert session.note_id == "a.md"
    assert session.text == "# A"
    assert "missing.md" in session.last_error


def test_failed_save_keeps_text_and_rendering():
    storage = MemoryStorage({"a.md": "# A"}, read_only=True)
    session = EditorSession(storage)
    session.load("a.md")
    session.update_content("# Edited")
    before = session.render()

    assert session.save() is Status.FAIL
    assert session.last_error == "Could not save a.md"
    assert session.text == "# Edited"
    assert session.render() == before
    assert storage.notes["a.md"] == "# A"


def test_save_without_note():
    session = _session()

    assert session.save() is Status.FAIL
    assert session.last_status is Status.FAIL
    assert session.last_error == "No note is open"


def test_copy_action_uses_session_clipboard():
    session = _session()

    action = session.copy_action(CodeBlock("ls -la"))

    assert action.copy() is Status.ACK
    assert session.clipboard.content == "ls -la"


def test_overlay_and_scroll_follow_editor():
    session = _session()
    session.update_content("find me")
    session.set_search("me")
    session.on_editor_scroll(40)

    assert session.overlay().matches == ["me"]
    assert session.scroll.overlay.top == 40
