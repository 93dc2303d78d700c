import pytest

from clj_sculptor.nodes import Fragment, ListNode
from clj_sculptor.renderer import Renderer


def render(renderer, read_form, text, column=0):
    return renderer.render(column, read_form(text)).to_string()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("[1 2 3]", "[1\n 2\n 3]"),
        ("#{a b}", "#{a\n  b}"),
        ("{:a 1 :b 2}", "{:a 1\n :b 2}"),
        ("(f)", "(f)"),
        ("()", "()"),
        ("(f a b)", "(f a\n   b)"),
        ("((f) a b)", "((f) a\n     b)"),
        ("'(a b)", "'(a b)"),
        ("#(+ % 1)", "#(+ %\n    1)"),
        ("@(f a)", "@(f a)"),
        ("^:private [a b]", "^:private [a\n           b]"),
        ('#inst "2020"', '#inst "2020"'),
        ("#:user{:a 1 :b 2}", "#:user{:a 1\n       :b 2}"),
        ("#?(:clj 1 :cljs 2)", "#?(:clj 1\n   :cljs 2)"),
        ("[a & more]", "[a\n & more]"),
    ],
)
def test_generic_layout(renderer, read_form, text, expected):
    assert render(renderer, read_form, text) == expected


def test_alignment_follows_start_column(renderer, read_form):
    assert render(renderer, read_form, "[1 2]", column=4) == "[1\n     2]"


def test_multiline_head_puts_argument_after_last_line(renderer, read_form):
    assert render(renderer, read_form, "([a b] c d)") == "([a\n  b] c\n     d)"


def test_map_value_starts_after_key(renderer, read_form):
    assert render(renderer, read_form, "{:k [1 2]}") == "{:k [1\n     2]}"


def test_trailing_comment_pushes_closing_delimiter(renderer, read_form):
    assert render(renderer, read_form, "[a ; last\n]") == "[a ;; last\n ]"


def test_standalone_comments_keep_their_line(renderer, read_form):
    assert render(renderer, read_form, "[a\n;; b next\nb]") == "[a\n ;; b next\n b]"


def test_comment_after_head_is_hoisted(renderer, read_form):
    rendered = renderer.render(0, read_form("(foo ; why\n bar baz)"))
    assert isinstance(rendered, Fragment)
    assert rendered.to_string() == ";; why\n(foo bar\n     baz)"


def test_hoisted_comment_lands_at_line_start(renderer, read_form):
    assert render(renderer, read_form, "[x (foo ;; c\n bar)]") == "[x\n ;; c\n (foo bar)]"


def test_comment_only_list_renders_empty(renderer, read_form):
    rendered = renderer.render(0, read_form("(;; nothing here\n)"))
    assert rendered.to_string() == ";; nothing here\n()"


def test_custom_special_form_table(read_form):
    plain = Renderer(special_forms={})
    assert plain.render(0, read_form("(def x 1)")).to_string() == "(def x\n     1)"


def test_extra_special_form(read_form):
    def one_per_line(renderer, column, head, items):
        return renderer.render_form(column, head, items, call_line=0, body_column=column + 2)

    renderer = Renderer(special_forms={"my-block": one_per_line})
    assert renderer.render(0, read_form("(my-block a b)")).to_string() == "(my-block\n  a\n  b)"


def test_render_returns_nodes(renderer, read_form):
    assert isinstance(renderer.render(0, read_form("(f a)")), ListNode)
