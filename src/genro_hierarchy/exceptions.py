# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Hierarchy exceptions."""

from __future__ import annotations


class HierarchyError(Exception):
    """Base exception for hierarchy errors."""

    pass


class NodeNotFoundError(HierarchyError, KeyError):
    """Raised when an id is not present in the store."""

    def __init__(self, node_id: object) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Node {self.node_id!r} does not exist"


class MalformedInputError(HierarchyError, ValueError):
    """Raised when input records cannot be loaded (missing or duplicate id)."""

    pass
