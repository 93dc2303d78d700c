import pytest

from clj_sculptor.lexer import ClojureSyntaxError
from clj_sculptor.nodes import (
    Atom,
    Comment,
    FnLiteral,
    ListNode,
    MapNode,
    Meta,
    NamespacedMap,
    Newline,
    ReaderConditional,
    SetNode,
    Tagged,
    Uneval,
    VectorNode,
    is_noise,
)
from clj_sculptor.reader import ParseException, parse_string


def significant(node):
    return [child for child in node.children if not is_noise(child)]


@pytest.mark.parametrize(
    "text",
    [
        "(defn f [a & more] {:a 1, :b #{2 3}})",
        "; header\n(foo) ; trailing\n\n#_(bar)",
        "#?(:clj 1 :cljs 2) #?@(:clj [a])",
        "`(~a ~@b) 'c @d #'e",
        '#inst "2020-01-01" #:user{:id 1} ##NaN #"re"',
        "^:private ^{:doc \"x\"} foo",
        '(str "multi\nline")',
    ],
)
def test_serialization_reproduces_source(text):
    assert parse_string(text).to_string() == text


def test_builds_collections():
    (form,) = significant(parse_string("(a [b] {c d} #{e})"))
    assert isinstance(form, ListNode)
    assert [type(child) for child in significant(form)] == [Atom, VectorNode, MapNode, SetNode]


def test_reader_macros_wrap_one_form():
    forms = significant(parse_string("#(inc %) #?(:clj 1) #_x #inst \"t\" #:a{:b 1}"))
    assert [type(form) for form in forms] == [FnLiteral, ReaderConditional, Uneval, Tagged, NamespacedMap]
    assert isinstance(forms[0].child, ListNode)
    assert forms[3].tag == "inst"
    assert forms[4].namespace == ":a"


def test_splicing_reader_conditional():
    (form,) = significant(parse_string("#?@(:clj [a])"))
    assert form.splicing
    assert form.prefix == "#?@"


def test_metadata_binds_to_next_form():
    (form,) = significant(parse_string("^:dynamic *x*"))
    assert isinstance(form, Meta)
    assert form.meta == Atom(text=":dynamic")
    assert form.target == Atom(text="*x*")


def test_comment_between_prefix_and_form_is_lifted():
    children = parse_string("'\n;; why\nfoo").children
    assert children[0] == Comment(text=";; why")
    assert children[1] == Newline()
    assert children[2].child == Atom(text="foo")


@pytest.mark.parametrize(
    "text, message",
    [
        (")", "Unmatched delimiter"),
        ("(a", "Unclosed delimiter"),
        ("(a]", "Mismatched delimiter"),
        ("'", "is not followed by a form"),
        ("(#_)", "is not followed by a form"),
        ("#:a[1]", "must be followed by a map"),
    ],
)
def test_malformed_input(text, message):
    with pytest.raises(ParseException, match=message):
        parse_string(text)


def test_parse_errors_are_syntax_errors():
    with pytest.raises(ClojureSyntaxError) as excinfo:
        parse_string("(a\n  (b]")
    assert str(excinfo.value).endswith("at 2:5")
