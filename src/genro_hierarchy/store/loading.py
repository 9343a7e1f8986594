# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Loaders turning flat or nested records into the canonical node map.

Both functions return a brand-new ``{id: record}`` dict in depth-first
pre-order; they never touch an existing store, so a failure leaves the
caller's store as it was.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, TYPE_CHECKING

from ..exceptions import MalformedInputError
from .metadata import NodeMap, apply_sibling_metadata, compute_breadcrumbs

if TYPE_CHECKING:
    from ..schema import FieldSchema

logger = logging.getLogger(__name__)


def _check_records(records: Any, kind: str) -> list[Any]:
    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
        raise MalformedInputError(
            f"{kind} records must be a list, not {type(records).__name__}"
        )
    return list(records)


def _record_id(record: Any, schema: FieldSchema, where: str) -> Any:
    if not isinstance(record, Mapping):
        raise MalformedInputError(
            f"Record {where} must be a mapping, not {type(record).__name__}"
        )
    node_id = record.get(schema.id)
    if node_id is None:
        raise MalformedInputError(f"Record {where} has no '{schema.id}' value")
    _check_hashable(node_id, f"Record {where} has an unhashable '{schema.id}' value")
    return node_id


def _check_hashable(value: Any, message: str) -> None:
    try:
        hash(value)
    except TypeError:
        raise MalformedInputError(f"{message}: {value!r}") from None


def _sort_value(value: Any) -> tuple[bool, Any]:
    # None sorts before any value
    return (value is not None, value)


# ==================== Flat records ====================

def build_from_flat(records: Iterable[Mapping[str, Any]], schema: FieldSchema) -> NodeMap:
    """Build the node map from records carrying parent references.

    Records whose parent is missing from the input, or is the record
    itself, become roots. Siblings are ordered by ``schema.sort`` when set
    (stable, None first), otherwise they keep input order. A repeated id
    keeps the latest record, at the latest record's input position.

    Args:
        records: Flat records, each with at least an id.
        schema: Field names.

    Returns:
        New pre-ordered id -> record map with level, flags, icons and
        breadcrumbs.

    Raises:
        MalformedInputError: If a record is not a mapping, has no id, or
            its id or parent value is unhashable.
    """
    records = _check_records(records, 'Flat')

    by_id: dict[Any, dict[str, Any]] = {}
    for position, record in enumerate(records):
        node_id = _record_id(record, schema, f"#{position}")
        _check_hashable(
            record.get(schema.parent),
            f"Record #{position} has an unhashable '{schema.parent}' value",
        )
        if by_id.pop(node_id, None) is not None:
            logger.warning("Duplicate node id detected: %r, keeping latest", node_id)
        by_id[node_id] = dict(record)

    children: dict[Any, list[Any]] = {}
    for node_id, record in by_id.items():
        parent_id = record.get(schema.parent)
        if parent_id is not None and (parent_id == node_id or parent_id not in by_id):
            logger.debug("Node %r: parent %r not usable, loaded as root", node_id, parent_id)
            parent_id = None
        record[schema.parent] = parent_id
        children.setdefault(parent_id, []).append(node_id)

    _detach_cycles(by_id, children, schema)

    if schema.sort is not None:
        for group in children.values():
            group.sort(key=lambda node_id: _sort_value(by_id[node_id].get(schema.sort)))

    nodes: NodeMap = {}
    pending = [(root_id, 0) for root_id in reversed(children.get(None, []))]
    while pending:
        node_id, level = pending.pop()
        record = by_id[node_id]
        record[schema.level] = level
        nodes[node_id] = record
        for child_id in reversed(children.get(node_id, [])):
            pending.append((child_id, level + 1))

    apply_sibling_metadata(nodes, schema)
    compute_breadcrumbs(nodes, schema)
    logger.debug("Loaded %d flat records into %d nodes", len(records), len(nodes))
    return nodes


def _reachable(children: dict[Any, list[Any]], start: Iterable[Any]) -> set[Any]:
    found: set[Any] = set()
    pending = list(start)
    while pending:
        node_id = pending.pop()
        if node_id in found:
            continue
        found.add(node_id)
        pending.extend(children.get(node_id, ()))
    return found


def _detach_cycles(
    by_id: dict[Any, dict[str, Any]],
    children: dict[Any, list[Any]],
    schema: FieldSchema,
) -> None:
    """Break the parent cycles that keep records out of reach of every root.

    Every parent chain starting from an unreachable record ends in a
    cycle. The record where the chain first repeats is a cycle member; it
    becomes a root, so the rest of the cycle and the records hanging off
    it keep their parents.
    """
    reached = _reachable(children, children.get(None, ()))
    if len(reached) == len(by_id):
        return
    for node_id in by_id:
        if node_id in reached:
            continue
        chain: set[Any] = set()
        member = node_id
        while member not in chain:
            chain.add(member)
            member = by_id[member][schema.parent]
        record = by_id[member]
        old_parent = record[schema.parent]
        logger.warning("Parent cycle through node %r: detached from %r as root", member, old_parent)
        children[old_parent].remove(member)
        record[schema.parent] = None
        children.setdefault(None, []).append(member)
        reached |= _reachable(children, [member])


# ==================== Nested records ====================

def build_from_nested(records: Iterable[Mapping[str, Any]], schema: FieldSchema) -> NodeMap:
    """Build the node map from records nesting their children.

    Id, parent, sort, children, level and breadcrumbs found on the input
    are discarded and derived again from the nesting. The sort value, when
    ``schema.sort`` is set, is the 0-based position among siblings.

    Args:
        records: Top level records; children live under ``schema.children``.
        schema: Field names.

    Returns:
        New pre-ordered id -> record map with level, flags, icons and
        breadcrumbs.

    Raises:
        MalformedInputError: If a record is not a mapping, has no id, or
            its id appears more than once.
    """
    nodes: NodeMap = {}
    _flatten(_check_records(records, 'Nested'), nodes, schema)
    apply_sibling_metadata(nodes, schema)
    compute_breadcrumbs(nodes, schema)
    logger.debug("Loaded %d nested nodes", len(nodes))
    return nodes


def _flatten(records: list[Any], nodes: NodeMap, schema: FieldSchema) -> None:
    derived = schema.derived_keys
    # (source, parent id, level, position among siblings), next to pop last
    pending = [(source, None, 0, position) for position, source in enumerate(records)]
    pending.reverse()
    while pending:
        source, parent_id, level, position = pending.pop()
        node_id = _record_id(source, schema, f"at level {level} position {position}")
        if node_id in nodes:
            raise MalformedInputError(f"Node id {node_id!r} appears more than once")

        record = {k: v for k, v in source.items() if k not in derived}
        record[schema.id] = node_id
        record[schema.parent] = parent_id
        if schema.sort is not None:
            record[schema.sort] = position
        record[schema.level] = level
        nodes[node_id] = record

        sub = source.get(schema.children)
        if isinstance(sub, (list, tuple)):
            pending.extend(
                (child, node_id, level + 1, index)
                for index, child in reversed(list(enumerate(sub)))
            )
