"""Canonicalization of namespace declarations.

Clauses are reordered so that generic clauses come first, then the require
family, then imports. Entries inside require and import clauses are rewritten
to their canonical collection type and sorted by their flat text. Standalone
comments travel with the clause or entry that follows them.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Optional, Sequence

from .grouping import Item, group_items, split_head, ungroup
from .layout import flatten
from .nodes import Atom, ListNode, Node, VectorNode, Whitespace

NAMESPACE_HEADS = frozenset({"ns"})
REQUIRE_KEYWORDS = frozenset({":require", ":require-macros", ":use", ":use-macros"})
IMPORT_KEYWORDS = frozenset({":import"})

PREAMBLE, OTHER, REQUIRE, IMPORT, TRAILING = range(5)


def normalize_namespace(node: ListNode) -> ListNode:
    leading, head, items = split_head(group_items(node.children))
    if head is None or not isinstance(head.element, Atom) or head.element.text not in NAMESPACE_HEADS:
        return node
    return node.model_copy(update={"children": ungroup([*leading, head, *normalize_declarations(items)])})


def normalize_declarations(items: Sequence[Item]) -> list[Item]:
    """Reorder the items following ``ns``; name, docstring and attribute map keep their place."""
    blocks: list[tuple[int, list[Item]]] = []
    pending: list[Item] = []
    seen_clause = False
    for item in items:
        if item.is_comment:
            pending.append(item)
            continue
        category = clause_category(item.element)
        if category is None:
            category = OTHER if seen_clause else PREAMBLE
        else:
            seen_clause = True
            item = replace(item, element=normalize_clause(item.element))
        blocks.append((category, [*pending, item]))
        pending = []
    if pending:
        blocks.append((TRAILING, pending))
    blocks.sort(key=lambda block: block[0])
    return [item for _, block in blocks for item in block]


def clause_keyword(node: Node) -> Optional[str]:
    if not isinstance(node, ListNode):
        return None
    _, head, _ = split_head(group_items(node.children))
    if head is None or not isinstance(head.element, Atom) or not head.element.is_keyword:
        return None
    return head.element.text


def clause_category(node: Node) -> Optional[int]:
    keyword = clause_keyword(node)
    if keyword is None:
        return None
    if keyword in REQUIRE_KEYWORDS:
        return REQUIRE
    if keyword in IMPORT_KEYWORDS:
        return IMPORT
    return OTHER


def normalize_clause(node: ListNode) -> ListNode:
    keyword = clause_keyword(node)
    rewrite: Optional[Callable[[Node], Node]] = None
    if keyword in REQUIRE_KEYWORDS:
        rewrite = require_entry
    elif keyword in IMPORT_KEYWORDS:
        rewrite = import_entry
    if rewrite is None:
        return node
    leading, head, entries = split_head(group_items(node.children))
    blocks: list[list[Item]] = []
    pending: list[Item] = []
    for entry in entries:
        if entry.is_comment:
            pending.append(entry)
            continue
        blocks.append([*pending, replace(entry, element=rewrite(entry.element))])
        pending = []
    blocks.sort(key=lambda block: flatten(block[-1].element).to_string())
    ordered = [item for block in blocks for item in block]
    return node.model_copy(update={"children": ungroup([*leading, head, *ordered, *pending])})


def require_entry(node: Node) -> Node:
    match node:
        case Atom() if not node.is_keyword and not node.is_string:
            return VectorNode(children=(node,))
        case ListNode():
            elements = [item for item in group_items(node.children) if not item.is_comment]
            if len(elements) > 1 and not _is_keyword(elements[1].element):
                # prefix list: (prefix lib-a [lib-b :as b])
                return node
            return VectorNode(children=node.children)
    return node


def import_entry(node: Node) -> Node:
    match node:
        case VectorNode():
            return ListNode(children=node.children)
        case Atom() if "." in node.text and not node.is_keyword and not node.is_string:
            # java.io.File -> (java.io File)
            package, _, name = node.text.rpartition(".")
            return ListNode(children=(Atom(text=package), Whitespace(), Atom(text=name)))
    return node


def _is_keyword(node: Node) -> bool:
    return isinstance(node, Atom) and node.is_keyword
