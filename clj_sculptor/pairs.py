"""Pairing of grouped items for maps, binding vectors and clause-based forms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .grouping import Item
from .nodes import Comment


@dataclass(frozen=True, slots=True)
class Pair:
    key: Item
    value: Item


@dataclass(frozen=True, slots=True)
class CommentRecord:
    node: Comment


@dataclass(frozen=True, slots=True)
class OrphanKey:
    item: Item


PairRecord = Pair | CommentRecord | OrphanKey


def build_pairs(items: Sequence[Item]) -> list[PairRecord]:
    """Pair items greedily from the left.

    A key's trailing comment is emitted as a standalone record in front of its
    pair, as are standalone comments found between a key and its value. A
    value keeps its own trailing comment.
    """
    records: list[PairRecord] = []
    pending: Item | None = None
    held: list[PairRecord] = []
    index = 0
    while index < len(items):
        item = items[index]
        index += 1
        if item.is_comment:
            record = CommentRecord(node=item.element)
            if pending is None:
                records.append(record)
            else:
                held.append(record)
            continue
        if pending is not None:
            records.extend(held)
            held = []
            records.append(Pair(key=pending, value=item))
            pending = None
            continue
        if item.comment is None:
            pending = item
            continue
        value_index = index
        while value_index < len(items) and items[value_index].is_comment:
            value_index += 1
        if value_index == len(items):
            records.append(OrphanKey(item=item))
            continue
        records.append(CommentRecord(node=item.comment))
        records.extend(CommentRecord(node=skipped.element) for skipped in items[index:value_index])
        records.append(Pair(key=item.without_comment(), value=items[value_index]))
        index = value_index + 1
    if pending is not None:
        records.append(OrphanKey(item=pending))
    records.extend(held)
    return records
