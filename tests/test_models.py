import dataclasses

import pytest

from notemark.models import (
    AccumulatorState,
    Blockquote,
    Document,
    EditorMode,
    Emphasis,
    Heading,
    Image,
    Link,
    ParserCursor,
    RawHtml,
    Status,
    Strong,
    Table,
    Text,
    plain_text,
)


def test_accumulator_state_members():
    assert [state.name for state in AccumulatorState] == [
        "NONE",
        "IN_CODE",
        "IN_TABLE",
        "IN_BLOCKQUOTE",
        "IN_RAW_MARKUP",
    ]


def test_editor_mode_and_status_members():
    assert {mode.name for mode in EditorMode} == {"EDIT", "PREVIEW"}
    assert {status.name for status in Status} == {"ACK", "FAIL"}


def test_parser_cursor_defaults():
    cursor = ParserCursor()

    assert cursor.line_index == 0
    assert cursor.state is AccumulatorState.NONE
    assert cursor.buffer == []
    assert cursor.language is None
    assert cursor.raw_tag is None


def test_parser_cursor_buffers_are_independent():
    first = ParserCursor()
    second = ParserCursor()

    first.buffer.append("line")

    assert second.buffer == []


def test_sequence_fields_are_stored_as_tuples():
    heading = Heading(1, [Text("a")])
    table = Table(header=[[Text("h")]], rows=[[[Text("c")]]])
    quote = Blockquote([[Text("q")]])

    assert heading.inline == (Text("a"),)
    assert table.header == ((Text("h"),),)
    assert table.rows == (((Text("c"),),),)
    assert quote.paragraphs == ((Text("q"),),)


def test_list_and_tuple_inputs_compare_equal():
    assert Document([Heading(2, [Text("x")])]) == Document((Heading(2, (Text("x"),)),))


def test_blocks_are_frozen():
    heading = Heading(1, [Text("a")])

    with pytest.raises(dataclasses.FrozenInstanceError):
        heading.level = 2


def test_document_iterates_over_blocks():
    document = Document([Heading(1, [Text("a")]), Heading(2, [Text("b")])])

    assert len(document) == 2
    assert [block.level for block in document] == [1, 2]


def test_plain_text():
    fragments = [
        Text("a "),
        Strong([Text("b")]),
        Emphasis([Text("c")]),
        Link([Text("d")], "u"),
        Image("e", "f.png"),
        RawHtml("<br>"),
    ]

    assert plain_text(fragments) == "a bcde<br>"
