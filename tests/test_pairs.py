from clj_sculptor.grouping import Item
from clj_sculptor.nodes import Atom, Comment
from clj_sculptor.pairs import CommentRecord, OrphanKey, Pair, build_pairs


def atom(text, comment=None):
    return Item(element=Atom(text=text), comment=Comment(text=comment) if comment else None)


def note(text):
    return Item(element=Comment(text=text))


def test_pairs_greedily():
    assert build_pairs([atom("a"), atom("1"), atom("b"), atom("2")]) == [
        Pair(key=atom("a"), value=atom("1")),
        Pair(key=atom("b"), value=atom("2")),
    ]


def test_odd_item_becomes_orphan_key():
    assert build_pairs([atom("a"), atom("1"), atom(":default")]) == [
        Pair(key=atom("a"), value=atom("1")),
        OrphanKey(item=atom(":default")),
    ]


def test_standalone_comment_between_pairs():
    assert build_pairs([atom("a"), atom("1"), note(";; b"), atom("b"), atom("2")]) == [
        Pair(key=atom("a"), value=atom("1")),
        CommentRecord(node=Comment(text=";; b")),
        Pair(key=atom("b"), value=atom("2")),
    ]


def test_comment_between_key_and_value_moves_before_pair():
    assert build_pairs([atom("a"), note(";; x"), atom("1")]) == [
        CommentRecord(node=Comment(text=";; x")),
        Pair(key=atom("a"), value=atom("1")),
    ]


def test_key_trailing_comment_moves_before_pair():
    assert build_pairs([atom("a", ";; key"), note(";; more"), atom("1", ";; value")]) == [
        CommentRecord(node=Comment(text=";; key")),
        CommentRecord(node=Comment(text=";; more")),
        Pair(key=atom("a"), value=atom("1", ";; value")),
    ]


def test_key_with_comment_and_no_value_is_orphan():
    assert build_pairs([atom("a", ";; key")]) == [OrphanKey(item=atom("a", ";; key"))]


def test_pending_key_keeps_held_comments_after_it():
    assert build_pairs([atom("a"), note(";; end")]) == [
        OrphanKey(item=atom("a")),
        CommentRecord(node=Comment(text=";; end")),
    ]
