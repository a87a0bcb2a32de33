from notemark.models import (
    AccumulatorState,
    Blank,
    CodeBlock,
    Heading,
    ListItem,
    Paragraph,
    ParserCursor,
    RawMarkup,
    Table,
    Text,
    ThematicBreak,
)
from notemark.parser import (
    _flush,
    _try_accumulate,
    _try_raw_markup,
    _try_toggle_fence,
    classify_line,
    closes_raw_markup,
    is_quote_line,
    is_table_line,
    raw_markup_tag,
    split_lines,
)


def test_split_lines_handles_crlf_and_trailing_newline():
    assert split_lines("a\r\nb") == ["a", "b"]
    assert split_lines("a\n") == ["a", ""]
    assert split_lines("a\r\r\nb") == ["a\r", "b"]


def test_try_toggle_fence_opens_code_block():
    cursor = ParserCursor()
    blocks = []

    assert _try_toggle_fence(cursor, blocks, "```python", None)
    assert cursor.state is AccumulatorState.IN_CODE
    assert cursor.language == "python"
    assert blocks == []


def test_try_toggle_fence_closes_code_block():
    cursor = ParserCursor(state=AccumulatorState.IN_CODE, buffer=["x = 1"], language="py")
    blocks = []

    assert _try_toggle_fence(cursor, blocks, "```", None)
    assert blocks == [CodeBlock("x = 1", "py")]
    assert cursor.state is AccumulatorState.NONE
    assert cursor.language is None


def test_try_toggle_fence_ignores_other_lines():
    cursor = ParserCursor()

    assert not _try_toggle_fence(cursor, [], "text ```", None)
    assert not _try_toggle_fence(cursor, [], "    ```", None)
    assert cursor.state is AccumulatorState.NONE


def test_try_toggle_fence_accepts_shallow_indent():
    cursor = ParserCursor()

    assert _try_toggle_fence(cursor, [], "   ```", None)
    assert cursor.state is AccumulatorState.IN_CODE


def test_try_accumulate_switches_buffers():
    cursor = ParserCursor()
    blocks = []

    assert _try_accumulate(cursor, blocks, "> quoted", None)
    assert cursor.state is AccumulatorState.IN_BLOCKQUOTE

    assert _try_accumulate(cursor, blocks, "| a |", None)
    assert cursor.state is AccumulatorState.IN_TABLE
    assert cursor.buffer == ["| a |"]
    assert len(blocks) == 1


def test_try_accumulate_rejects_plain_lines():
    cursor = ParserCursor()

    assert not _try_accumulate(cursor, [], "plain", None)
    assert cursor.buffer == []


def test_try_raw_markup_opens_and_closes():
    cursor = ParserCursor()
    blocks = []

    assert _try_raw_markup(cursor, blocks, "<div>", None)
    assert cursor.state is AccumulatorState.IN_RAW_MARKUP
    assert cursor.raw_tag == "div"

    assert _try_raw_markup(cursor, blocks, "</div>", None)
    assert blocks == [RawMarkup("<div>\n</div>")]
    assert cursor.state is AccumulatorState.NONE


def test_try_raw_markup_leaves_blank_line_unclaimed():
    cursor = ParserCursor(state=AccumulatorState.IN_RAW_MARKUP, buffer=["<pre>"], raw_tag="pre")
    blocks = []

    assert not _try_raw_markup(cursor, blocks, "  ", None)
    assert blocks == [RawMarkup("<pre>")]


def test_flush_without_buffer_is_a_no_op():
    cursor = ParserCursor()
    blocks = []

    _flush(cursor, blocks, None)

    assert blocks == []
    assert cursor.state is AccumulatorState.NONE


def test_flush_table_resets_cursor():
    cursor = ParserCursor(state=AccumulatorState.IN_TABLE, buffer=["| a |", "|---|"])
    blocks = []

    _flush(cursor, blocks, None)

    assert blocks == [Table(header=[[Text("a")]], rows=[])]
    assert cursor.buffer == []
    assert cursor.state is AccumulatorState.NONE


def test_classify_line():
    assert classify_line("## Notes") == Heading(2, [Text("Notes")])
    assert classify_line("***") == ThematicBreak()
    assert classify_line("- [ ]") == ListItem([], checked=False)
    assert classify_line("  * nested") == ListItem([Text("nested")])
    assert classify_line("") == Blank()
    assert classify_line("  indented") == Paragraph([Text("  indented")])


def test_raw_markup_tag():
    assert raw_markup_tag("<details open>") == "details"
    assert raw_markup_tag("  <TABLE>") == "table"
    assert raw_markup_tag("<span>inline</span>") is None
    assert raw_markup_tag("<div/>") is None
    assert raw_markup_tag("<divider>") is None
    assert raw_markup_tag("text <div>") is None


def test_closes_raw_markup():
    assert closes_raw_markup("done</DIV>  ", "div")
    assert not closes_raw_markup("</div> tail", "div")


def test_line_predicates():
    assert is_quote_line("  > a")
    assert not is_quote_line("a > b")
    assert is_table_line(" |x| ")
    assert not is_table_line("|")
    assert not is_table_line("| a")
