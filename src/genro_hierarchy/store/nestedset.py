# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Nested set numbering.

Each node gets a ``left``/``right`` pair such that B is a descendant of A
iff ``A.left < B.left`` and ``B.right < A.right``. Subtrees can then be
fetched with a single range query (``WHERE left BETWEEN a.left AND a.right``).
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .metadata import NodeMap

if TYPE_CHECKING:
    from ..schema import FieldSchema


def compute_nested_set(nodes: NodeMap, schema: FieldSchema) -> None:
    """Write left/right bounds on every stored record.

    Numbering follows the pre-ordered map: a node takes ``left`` on entry
    and ``right`` once every deeper node after it has been numbered. A
    stack of open (level, record) pairs is closed whenever a node at the
    same or a shallower level shows up, so the depth of the tree is not
    bounded by the interpreter's recursion limit. Running it again on an
    unchanged map gives the same bounds.
    """
    counter = 1
    stack: list[tuple[int, dict[str, Any]]] = []

    for record in nodes.values():
        level = record.get(schema.level, 0)
        while stack and stack[-1][0] >= level:
            stack.pop()[1][schema.right] = counter
            counter += 1
        record[schema.left] = counter
        counter += 1
        stack.append((level, record))

    while stack:
        stack.pop()[1][schema.right] = counter
        counter += 1
