"""End-to-end rendering tests for annotations.

Includes the regression cases that once crashed or stalled the inline
parser: empty note bodies, time notation in headings, and nested markers.
"""

import time

import pytest
from markdown_it import MarkdownIt

from marginalia import AnnotationConfig, Markdown, annotations_plugin


class TestSidenotes:
    """Sidenote syntax (++ref|note++)."""

    def test_basic_sidenote(self, md: MarkdownIt) -> None:
        result = md.render("Text ++reference|note content++ more text")
        assert result == (
            '<p>Text <span class="sn-ref">reference</span>'
            '<span class="sidenote">note content</span> more text</p>\n'
        )

    def test_markdown_in_content(self, md: MarkdownIt) -> None:
        result = md.render("++ref|**bold** and *italic*++")
        assert '<span class="sidenote"><strong>bold</strong> and <em>italic</em></span>' in result

    def test_markdown_matches_top_level_rendering(self, md: MarkdownIt) -> None:
        inner = "**bold**, *italic*, `code` and [link](http://example.com)"
        top = md.renderInline(inner)
        result = md.renderInline(f"++ref|{inner}++")
        assert result == f'<span class="sn-ref">ref</span><span class="sidenote">{top}</span>'

    def test_markdown_in_reference(self, md: MarkdownIt) -> None:
        result = md.renderInline("++*Phm* 2|note++")
        assert result.startswith('<span class="sn-ref"><em>Phm</em> 2</span>')

    def test_no_pipe_rejected(self, md: MarkdownIt) -> None:
        result = md.render("++no pipe here++")
        assert "sidenote" not in result
        assert result == "<p>++no pipe here++</p>\n"

    def test_empty_reference_rejected(self, md: MarkdownIt) -> None:
        assert md.render("++|note++") == "<p>++|note++</p>\n"
        assert md.render("++|note only++") == "<p>++|note only++</p>\n"

    def test_empty_note_content(self, md: MarkdownIt) -> None:
        result = md.render("++Phm 2|++")
        assert result == '<p><span class="sn-ref">Phm 2</span><span class="sidenote"></span></p>\n'


class TestMarginalNotes:
    """Marginal note syntax (!!ref|note!!)."""

    def test_basic_marginal_note(self, md: MarkdownIt) -> None:
        result = md.render("Text !!reference|note content!! more text")
        assert '<span class="mn-ref">reference</span>' in result
        assert '<span class="mnote">note content</span>' in result

    def test_empty_content(self, md: MarkdownIt) -> None:
        assert md.renderInline("!!ref|!!") == '<span class="mn-ref">ref</span><span class="mnote"></span>'

    def test_image_syntax_unaffected(self, md: MarkdownIt) -> None:
        result = md.renderInline("![alt](pic.png)")
        assert result == '<img src="pic.png" alt="alt" />'


class TestSidebars:
    """Left ($content$) and right (@content@) sidebars."""

    def test_left_sidebar(self, md: MarkdownIt) -> None:
        result = md.render("Text $sidebar content$ more text")
        assert '<span class="left-sidebar">sidebar content</span>' in result

    def test_left_sidebar_with_markdown(self, md: MarkdownIt) -> None:
        result = md.render("$**bold** sidebar$")
        assert result == '<p><span class="left-sidebar"><strong>bold</strong> sidebar</span></p>\n'

    def test_right_sidebar(self, md: MarkdownIt) -> None:
        result = md.render("Text @sidebar content@ more text")
        assert '<span class="right-sidebar">sidebar content</span>' in result

    def test_time_notation_in_heading(self, md: MarkdownIt) -> None:
        result = md.render("## WIR SIND SOLDATEN FÜR CHRISTUS @(3 Min.)@")
        assert result == (
            "<h2>WIR SIND SOLDATEN FÜR CHRISTUS "
            '<span class="right-sidebar">(3 Min.)</span></h2>\n'
        )

    def test_multiple_right_sidebars(self, md: MarkdownIt) -> None:
        result = md.render("@first@ and @second@")
        assert result.count("right-sidebar") == 2

    def test_marker_at_end_of_line(self, md: MarkdownIt) -> None:
        assert "right-sidebar" in md.render("Text ending with @sidebar@")

    def test_empty_sidebar(self, md: MarkdownIt) -> None:
        assert md.render("$$") == '<p><span class="left-sidebar"></span></p>\n'

    def test_consecutive_sidebars(self, md: MarkdownIt) -> None:
        result = md.renderInline("$left$$left2$@right@@right2@")
        assert result == (
            '<span class="left-sidebar">left</span>'
            '<span class="left-sidebar">left2</span>'
            '<span class="right-sidebar">right</span>'
            '<span class="right-sidebar">right2</span>'
        )


class TestLiteralFallback:
    """Malformed annotations stay plain text."""

    def test_unclosed_sidenote(self, md: MarkdownIt) -> None:
        assert md.render("Text ++unclosed") == "<p>Text ++unclosed</p>\n"

    def test_unclosed_sidebar(self, md: MarkdownIt) -> None:
        assert md.render("costs $5") == "<p>costs $5</p>\n"

    def test_special_characters_escaped(self, md: MarkdownIt) -> None:
        result = md.render('++ref with <>&"|special chars++')
        assert "ref with &lt;&gt;&amp;&quot;" in result
        assert '<span class="sidenote">special chars</span>' in result

    def test_close_marker_past_window(self, md: MarkdownIt) -> None:
        text = "$" + "a" * 1500 + "$"
        assert md.render(text) == f"<p>{text}</p>\n"

    def test_escaped_marker(self, md: MarkdownIt) -> None:
        assert md.renderInline(r"\$not a sidebar$") == "$not a sidebar$"

    def test_marker_inside_code_span(self, md: MarkdownIt) -> None:
        assert md.renderInline("`$x$`") == "<code>$x$</code>"


class TestNesting:
    """Annotations inside annotation content, bounded by max_depth."""

    NESTED = "++a|$b @c !!d|**e**!! @ $++"

    def test_content_past_ceiling_is_literal(self, md: MarkdownIt) -> None:
        result = md.renderInline(self.NESTED)
        assert '<span class="left-sidebar">' in result
        assert '<span class="right-sidebar">' in result
        assert '<span class="mn-ref">d</span><span class="mnote">**e**</span>' in result
        assert "<strong>" not in result

    def test_deeper_limit_parses_deepest_level(self) -> None:
        md = MarkdownIt("commonmark").use(annotations_plugin, AnnotationConfig(max_depth=4))
        result = md.renderInline(self.NESTED)
        assert '<span class="mnote"><strong>e</strong></span>' in result

    def test_zero_depth_keeps_all_content_literal(self) -> None:
        md = MarkdownIt("commonmark").use(annotations_plugin, AnnotationConfig(max_depth=0))
        result = md.renderInline("++*a*|**b**++")
        assert result == '<span class="sn-ref">*a*</span><span class="sidenote">**b**</span>'

    def test_same_kind_markers_do_not_nest(self, md: MarkdownIt) -> None:
        # The first closing ++ ends each span, so this never reaches the depth
        # ceiling; test_content_past_ceiling_is_literal covers the ceiling.
        result = md.render("++outer|++inner|++deep|content++++++;")
        assert result.count('class="sn-ref"') == 2
        assert result.endswith("++++;</p>\n")

    def test_deep_nesting_completes(self, md: MarkdownIt) -> None:
        text = "".join(f"++r{i}|$" for i in range(200)) + "x" + "$++" * 200
        start = time.perf_counter()
        result = md.render(text)
        assert isinstance(result, str)
        assert time.perf_counter() - start < 5


class TestHostIntegration:
    """Cooperation with markdown-it's own inline rules."""

    def test_sidenote_inside_link_label(self, md: MarkdownIt) -> None:
        result = md.renderInline("[see ++ref|note++](http://example.com)")
        assert result == (
            '<a href="http://example.com">see <span class="sn-ref">ref</span>'
            '<span class="sidenote">note</span></a>'
        )

    def test_sidebar_with_bracket_inside_link_label(self, md: MarkdownIt) -> None:
        result = md.renderInline("[a @b]c@](http://example.com)")
        assert result.startswith('<a href="http://example.com">a <span class="right-sidebar">')

    def test_link_inside_annotation_in_link_label(self, md: MarkdownIt) -> None:
        result = md.renderInline("[see ++r|[x](y)++](z)")
        assert result.count("<a ") == 1
        assert result == (
            '[see <span class="sn-ref">r</span>'
            '<span class="sidenote"><a href="y">x</a></span>](z)'
        )

    def test_link_in_nested_annotation_in_link_label(self, md: MarkdownIt) -> None:
        result = md.renderInline("[see ++r|$[x](y)$++](z)")
        assert result.count("<a ") == 1
        assert result.startswith("[see ")

    def test_nested_link_renders_as_at_top_level(self, md: MarkdownIt) -> None:
        plain = md.renderInline("[see [x](y)](z)")
        annotated = md.renderInline("[see $[x](y)$](z)")
        link = '<a href="y">x</a>'
        assert annotated == plain.replace(link, f'<span class="left-sidebar">{link}</span>')

    def test_emphasis_does_not_cross_annotation(self, md: MarkdownIt) -> None:
        result = md.renderInline("*a $b* c$")
        assert "<em>" not in result

    def test_complex_document(self, md: MarkdownIt) -> None:
        document = """
# Erfüllen wir unseren Dienst und ernten die Segnungen

## WIR SIND SOLDATEN FÜR CHRISTUS @(3 Min.)@

- Paulus bezeichnete Archippus als „Mitkämpfer" Christi (++Phm 2|++)
- Wie gute Kämpfer oder Soldaten müssen Pioniere stets dienstbereit sein (++it-2 974-975|++)

## WIR MÜSSEN DIENSTBEREIT SEIN @(6 Min.)@

- Auch Pioniere haben einen Auftrag angenommen (++Gal 6:10|++; ++w09 15. 1. 14-15 Abs. 11-13|++)
"""
        result = md.render(document)
        assert result.count('class="sn-ref"') == 4
        assert result.count('class="right-sidebar"') == 2

    def test_mixed_line_completes_quickly(self, md: MarkdownIt) -> None:
        start = time.perf_counter()
        result = md.render("$left$ text @right@ more ++ref|note++ end")
        assert time.perf_counter() - start < 1
        assert result.count("<span") == 4

    def test_idempotent(self, md: MarkdownIt) -> None:
        text = "++a|**b**++ $c$ !!d|e!! @f@ ++|bad++"
        assert md.render(text) == md.render(text)


class TestMarkdownClass:
    """High-level Markdown wrapper."""

    def test_call_renders(self) -> None:
        assert Markdown()("$x$") == '<p><span class="left-sidebar">x</span></p>\n'

    def test_parse_returns_tokens(self) -> None:
        tokens = Markdown().parse("++ref|note++")
        children = tokens[1].children
        assert children is not None
        assert children[0].type == "sidenote_open"
        assert children[-1].type == "sidenote_close"

    def test_render_inline(self) -> None:
        assert Markdown().render_inline("@r@") == '<span class="right-sidebar">r</span>'

    def test_module_level_render(self) -> None:
        from marginalia import render

        assert render("$x$", plugins=["annotations"]) == '<p><span class="left-sidebar">x</span></p>\n'

    @pytest.mark.parametrize("kind", ["sidenote", "marginnote", "left_sidebar", "right_sidebar"])
    def test_only_enabled_kinds_render(self, kind: str) -> None:
        md = Markdown(config=AnnotationConfig(kinds=(kind,)))
        result = md("++a|b++ !!c|d!! $e$ @f@")
        assert result.count("<span") == (2 if kind in ("sidenote", "marginnote") else 1)
