"""Joins rendered top-level entries into the document root."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .nodes import Forms, Newline, Node


@dataclass(frozen=True, slots=True)
class TopLevelEntry:
    nodes: tuple[Node, ...]
    is_comment: bool = False


def separator(previous: TopLevelEntry) -> tuple[Node, ...]:
    # a comment annotates whatever follows it
    if previous.is_comment:
        return (Newline(),)
    return (Newline(), Newline())


def join_top_level(entries: Sequence[TopLevelEntry]) -> Forms:
    children: list[Node] = []
    for index, entry in enumerate(entries):
        if index:
            children.extend(separator(entries[index - 1]))
        children.extend(entry.nodes)
    return Forms(children=tuple(children))
