from __future__ import annotations

import string

from hypothesis import assume, given
from hypothesis import strategies as st
from notemark.constants import ESCAPABLE_CHARACTERS
from notemark.inline import transform_inline
from notemark.models import Code, CodeBlock, Document, Highlighted, Paragraph, Text, plain_text
from notemark.overlay import project_overlay
from notemark.parser import parse_markdown

search_strategy = st.one_of(st.none(), st.text(max_size=8))
word_strategy = st.text(alphabet=string.ascii_letters + string.digits, min_size=1, max_size=16)


@given(st.text(), search_strategy)
def test_parse_never_raises_and_never_returns_empty(text: str, search: str | None):
    document = parse_markdown(text, search)

    assert isinstance(document, Document)
    assert len(document) >= 1


@given(st.text(), search_strategy)
def test_parse_is_deterministic(text: str, search: str | None):
    assert parse_markdown(text, search) == parse_markdown(text, search)


@given(st.text(alphabet=string.ascii_letters + string.digits + " ", min_size=1, max_size=64))
def test_plain_lines_round_trip_through_paragraphs(text: str):
    assume(text.strip())

    document = parse_markdown(text)

    assert document == Document([Paragraph([Text(text)])])
    assert plain_text(document.blocks[0].inline) == text


inline_plain_strategy = st.text(
    alphabet=st.characters(exclude_characters="*_`\\[]<!\n\r", exclude_categories=("Cs",))
)


@given(inline_plain_strategy)
def test_text_without_delimiters_is_kept_exactly(text: str):
    assert plain_text(transform_inline(text)) == text


private_use_token_strategy = st.sampled_from(
    ["\ue000", "\uf8fe", "\uf8ff", "\uf900", "\uf901", "\U000f0000", "a", " ", "\\*"]
)


@given(st.lists(private_use_token_strategy, max_size=24))
def test_private_use_neighbours_are_never_rewritten(tokens: list[str]):
    text = "".join(tokens)
    expected = text.replace("\\*", "*")

    assert plain_text(transform_inline(text)) == expected


@given(st.text(), st.text(max_size=8))
def test_overlay_covers_text_exactly(text: str, search: str):
    overlay = project_overlay(text, search)

    assert overlay.text == text
    assert overlay.text.count("\n") == text.count("\n")


@given(word_strategy)
def test_search_never_highlights_inside_code(word: str):
    assert transform_inline(f"`{word}`", word) == [Code(word)]


@given(st.sampled_from(ESCAPABLE_CHARACTERS))
def test_escaped_characters_are_literal(character: str):
    assert transform_inline(f"\\{character}") == [Text(character)]


@given(st.text(alphabet=string.ascii_letters + " ", max_size=64), word_strategy)
def test_highlighted_fragments_match_search(text: str, word: str):
    for fragment in transform_inline(text, word):
        if isinstance(fragment, Highlighted):
            assert fragment.text.lower() == word.lower()


line_strategy = st.text(
    alphabet=st.characters(exclude_characters="`\n\r", exclude_categories=("Cs",)),
    max_size=20,
)


@given(st.lists(line_strategy, max_size=10))
def test_unterminated_fence_keeps_rest_verbatim(lines: list[str]):
    body = "\n".join(lines)

    assert parse_markdown("```\n" + body) == Document([CodeBlock(body)])
