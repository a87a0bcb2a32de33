from notemark.overlay import (
    MatchLocation,
    Overlay,
    OverlaySpan,
    ScrollOffset,
    ScrollSync,
    find_first_match,
    project_overlay,
    render_overlay_html,
)


def test_overlay_preserves_text_and_marks_matches():
    text = "# Cats\n\nA **cat** sat.\n"

    overlay = project_overlay(text, "cat")

    assert overlay.text == text
    assert overlay.matches == ["Cat", "cat"]
    assert overlay.text.count("\n") == text.count("\n")


def test_overlay_spans():
    assert project_overlay("a Cat", "cat").spans == (
        OverlaySpan("a "),
        OverlaySpan("Cat", highlighted=True),
    )


def test_overlay_without_search_is_one_hidden_span():
    assert project_overlay("text", "") == Overlay((OverlaySpan("text"),))
    assert project_overlay("text") == Overlay((OverlaySpan("text"),))


def test_overlay_of_empty_text():
    assert project_overlay("", "x").spans == ()


def test_overlay_keeps_markdown_syntax_visible_in_place():
    overlay = project_overlay("`code` and **code**", "code")

    assert overlay.text == "`code` and **code**"
    assert len(overlay.matches) == 2


def test_render_overlay_html_escapes_text():
    html = render_overlay_html(project_overlay("<b>x</b> & x", "x"))

    assert html == (
        '<span class="overlay-hidden">&lt;b&gt;</span>'
        '<mark class="overlay-match">x</mark>'
        '<span class="overlay-hidden">&lt;/b&gt; &amp; </span>'
        '<mark class="overlay-match">x</mark>'
    )


def test_find_first_match_reports_line_and_column():
    assert find_first_match("first\nsecond CAT\ncat", "cat") == MatchLocation(
        offset=13, line=1, column=7, length=3
    )


def test_find_first_match_without_result():
    assert find_first_match("abc", "z") is None
    assert find_first_match("abc", "") is None


def test_scroll_sync_mirrors_editor_offset():
    sync = ScrollSync()

    offset = sync.on_scroll(120, 4)

    assert offset == ScrollOffset(120, 4)
    assert sync.overlay == sync.editor
    assert sync.in_sync
