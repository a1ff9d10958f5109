"""Extraction of using directives from C# syntax trees."""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node

USING_DIRECTIVE = "using_directive"

# Node kinds that make a directive's target a name. Anything else (predefined,
# tuple, pointer or array types behind an alias) has no name to count.
_NAME_NODE_TYPES = frozenset(
    {
        "identifier",
        "qualified_name",
        "generic_name",
        "alias_qualified_name",
    }
)


def extract_usings(root: Node, source: bytes) -> List[str]:
    """Return the names imported by every using directive under ``root``.

    Directives are found at any depth (file scope, block and file-scoped
    namespaces, preprocessor regions) and returned in document order.
    Aliases count under their target: ``using J = System.Text.Json;`` yields
    ``System.Text.Json``.
    """
    names: List[str] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == USING_DIRECTIVE:
            name = _directive_name(node, source)
            if name:
                names.append(name)
            continue
        stack.extend(reversed(node.children))
    return names


def _directive_name(node: Node, source: bytes) -> Optional[str]:
    # The target is always the last named child; an alias identifier, if
    # present, comes before the '='.
    candidates = [child for child in node.named_children if child.type != "comment"]
    if not candidates:
        return None
    target = candidates[-1]
    if target.type not in _NAME_NODE_TYPES:
        return None
    return _node_text(target, source)


def _node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


__all__ = ["USING_DIRECTIVE", "extract_usings"]
