"""
Pagecraft Kernel — the editor's document model.

Components:
  types       — Template → Section → Component → Element tree, NodePath
  schema      — per-type validation (returns error lists)
  hydration   — serialize / deserialize with full diagnostics
  catalog     — read-only starter templates
  store       — DocumentStore: the single owner of document + session state
  selection   — focused node and its on-screen rect
  loader      — async fetches into the store, last writer wins
"""

from editor.kernel.catalog import TemplateCatalog, default_catalog
from editor.kernel.errors import EditorError, HydrationError, LockedNode, NotFound, SchemaViolation
from editor.kernel.hydration import deserialize, dumps, hash_template, serialize
from editor.kernel.store import DocumentStore
from editor.kernel.types import NodePath, Rect, Template

__all__ = [
    "DocumentStore",
    "TemplateCatalog",
    "default_catalog",
    "serialize",
    "deserialize",
    "dumps",
    "hash_template",
    "NodePath",
    "Rect",
    "Template",
    "EditorError",
    "NotFound",
    "LockedNode",
    "SchemaViolation",
    "HydrationError",
]
