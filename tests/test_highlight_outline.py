from md_engine.markdown import (
    BlockQuote,
    CodeBlock,
    Heading,
    HighlightToken,
    MarkdownHighlighter,
    OrderedList,
    Paragraph,
    TokenStyle,
    UnorderedList,
    estimate_reading_time,
    generate_toc,
    render,
    word_count,
)


def test_plain_line_is_single_token() -> None:
    line = MarkdownHighlighter().highlight_line("just text")

    assert line.tokens == (HighlightToken("just text"),)


def test_bold_and_italic_markers_toggle_style() -> None:
    line = MarkdownHighlighter().highlight_line("a **b** _c_")

    assert line.tokens == (
        HighlightToken("a "),
        HighlightToken("b", TokenStyle(bold=True)),
        HighlightToken(" "),
        HighlightToken("c", TokenStyle(italic=True)),
    )
    assert line.text == "a b c"


def test_markers_inside_code_are_literal() -> None:
    line = MarkdownHighlighter().highlight_line("`*x*` y")

    assert line.tokens == (
        HighlightToken("*x*", TokenStyle(code=True)),
        HighlightToken(" y"),
    )


def test_strikethrough_needs_double_tilde() -> None:
    line = MarkdownHighlighter().highlight_line("~~gone~~ ~kept")

    assert line.tokens == (
        HighlightToken("gone", TokenStyle(strikethrough=True)),
        HighlightToken(" ~kept"),
    )


def test_unclosed_marker_styles_rest_of_line() -> None:
    line = MarkdownHighlighter().highlight_line("**open")

    assert line.tokens == (HighlightToken("open", TokenStyle(bold=True)),)


def test_empty_line_has_one_empty_token() -> None:
    assert MarkdownHighlighter().highlight_line("").tokens == (HighlightToken(""),)


def test_highlight_text_splits_lines() -> None:
    lines = MarkdownHighlighter().highlight_text("a\n*b*\n")

    assert [line.text for line in lines] == ["a", "b", ""]


def test_toc_lists_top_level_headings() -> None:
    elements = render("# One\n\ntext\n\n## Two\n\n> # Quoted")

    assert generate_toc(elements) == [(1, "One"), (2, "Two")]


def test_word_count_walks_nested_blocks() -> None:
    elements = (
        Heading(1, "Two words"),
        Paragraph("three more words"),
        BlockQuote((Paragraph("quoted"),)),
        UnorderedList(((Paragraph("a b"),), (OrderedList(((Paragraph("c"),),)),))),
        CodeBlock("", "not counted at all"),
    )

    assert word_count(elements) == 9


def test_reading_time_has_one_minute_floor() -> None:
    assert estimate_reading_time(0) == 1
    assert estimate_reading_time(199) == 1
    assert estimate_reading_time(400) == 2
    assert estimate_reading_time(1099) == 5
