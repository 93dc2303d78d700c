import pytest

from clj_sculptor import ClojureSyntaxError, SourceFormatter, format_source, tokenize
from clj_sculptor.lexer import TokenType
from clj_sculptor.nodes import Forms

LAYOUT_TOKENS = {TokenType.WHITESPACE, TokenType.NEWLINE, TokenType.COMMA, TokenType.COMMENT, TokenType.EOF}

IDEMPOTENCE_CASES = [
    "(foo ;; why\n bar baz)",
    "[x (foo ;; c\n bar)]",
    "{:a ;; key\n 1 :b 2 ;; two\n}",
    "(let [a 1 ;; first\n b 2 ;; second\n] a)",
    "(cond ;; head\n a b ;; why b\n ;; next\n c d :else)",
    "(defn f\n  ;; before params\n  [x] x)",
    "(ns a\n ;; doc comes first\n (:require\n ;; zed\n z a))",
    "(-> x #_ #_ (f) (g) (h))",
    "#?(:clj (do a ;; jvm\n b) :cljs c)",
    "(foo\n\n\n  bar)\n\n\n\n(baz)",
    "(cond a (f ;c\n x))",
    "(case k :a (g ;c\n 1))",
    "(condp = v 1 (h ;; one\n a) ;; two\n 2 b)",
    "(ns e (:import java.io.File (java.util Date)))",
]


def significant_tokens(text):
    return [token.value for token in tokenize(text) if token.token_type not in LAYOUT_TOKENS]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("(def x 1)", "(def x\n  1)"),
        ("(defn f [a b] (+ a b))", "(defn f [a\n         b]\n  (+ a\n     b))"),
        ("[1\n  2\n   3]", "[1\n 2\n 3]"),
        (
            "(ns e (:import [java.util Date]) (:require [a.b :as c]))",
            "(ns e\n  (:require [a.b :as c])\n  (:import (java.util Date)))",
        ),
        ("(cond a b c d)", "(cond\n  a\n  b\n\n  c\n  d)"),
    ],
)
def test_reference_examples(text, expected):
    assert format_source(text) == expected


@pytest.mark.parametrize("text", IDEMPOTENCE_CASES)
def test_formatting_is_idempotent(text):
    once = format_source(text)
    assert format_source(once) == once


@pytest.mark.parametrize("text", IDEMPOTENCE_CASES)
def test_no_trailing_whitespace(text):
    for line in format_source(text).split("\n"):
        assert line == line.rstrip()


def test_sample_is_idempotent(sample_source):
    once = format_source(sample_source)
    assert format_source(once) == once


def test_every_comment_survives(sample_source):
    formatted = format_source(sample_source)
    for comment in (";; string helpers", ";; counters", ";; side effect", ";; first", ";; the common case"):
        assert comment in formatted


def test_code_is_unchanged_apart_from_layout(sample_source):
    source = sample_source[sample_source.index("; counters") :]
    assert significant_tokens(format_source(source)) == significant_tokens(source)


def test_top_level_separation():
    text = "(a)\n; note\n(b) (c)"
    assert format_source(text) == "(a)\n\n;; note\n(b)\n\n(c)"


def test_trailing_comment_on_top_level_form():
    assert format_source("(a) ; done") == "(a) ;; done"


def test_comments_are_normalized():
    assert format_source(";   spaced   \n(a)") == ";;   spaced\n(a)"


def test_strings_keep_their_content():
    assert format_source('(str "a\n   b" c)') == '(str "a\n   b"\n     c)'


@pytest.mark.parametrize("text", ["", "   \n\n  ", ",,,"])
def test_empty_documents(text):
    assert format_source(text) == ""


@pytest.mark.parametrize("text", ["(a", "(a]", ")", '"open', "#%x"])
def test_syntax_errors_propagate(text):
    with pytest.raises(ClojureSyntaxError):
        format_source(text)


def test_formatter_exposes_pipeline_stages():
    formatter = SourceFormatter("(f a b)")
    assert isinstance(formatter.reader.parsed_tree, Forms)
    assert formatter.formatted_text == "(f a\n   b)"
    assert formatter.lexer.tokens[-1].token_type == TokenType.EOF


def test_bare_imports_are_split_and_sorted():
    assert format_source("(ns e (:import java.io.File (java.util Date)))") == (
        "(ns e\n  (:import (java.io File)\n           (java.util Date)))"
    )
