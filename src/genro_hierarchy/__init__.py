# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-Hierarchy - Flat and nested views of an ordered hierarchy.

A lightweight, zero-dependency library that converts parent-referencing
records into nested trees and back, keeping levels, breadcrumbs, sibling
flags, tree-line icons and nested set bounds on every node.
"""

__version__ = "0.1.0"

from .exceptions import (
    HierarchyError,
    MalformedInputError,
    NodeNotFoundError,
)
from .node import TreeNode
from .schema import FieldSchema
from .store import TreeStore, load_flat, load_nested

__all__ = [
    # Core classes
    "TreeStore",
    "TreeNode",
    "FieldSchema",
    # Loaders
    "load_flat",
    "load_nested",
    # Exceptions
    "HierarchyError",
    "NodeNotFoundError",
    "MalformedInputError",
]
