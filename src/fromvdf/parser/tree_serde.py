"""
Tree Serialization - JSON conversion for parsed VDF trees.

Depends only on json and the node types, so callers can ship trees
between processes or cache them without pulling in the CLI or config.

Usage:
    from fromvdf.parser.tree_serde import serialize_tree, deserialize_tree, count_nodes
"""

import json
from typing import Any, Dict, Union

from fromvdf.parser.parser import ScalarNode, TableNode, VdfNode


def serialize_tree(tree: TableNode) -> bytes:
    """
    Serialize a tree to JSON bytes.

    Args:
        tree: Parsed root table

    Returns:
        UTF-8 encoded JSON bytes
    """
    return json.dumps(tree.to_dict(), separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def _node_from_dict(data: Dict[str, Any]) -> VdfNode:
    node_type = data.get('_type')
    line = data.get('line', 0)
    column = data.get('column', 0)
    if node_type == 'scalar':
        return ScalarNode(value=data['value'], line=line, column=column)
    if node_type == 'table':
        table = TableNode(line=line, column=column)
        for key, child in data.get('entries', {}).items():
            table.set(key, _node_from_dict(child))
        return table
    raise ValueError(f"Unknown node type: {node_type!r}")


def deserialize_tree(data: Union[bytes, str]) -> TableNode:
    """
    Rebuild a tree from JSON produced by serialize_tree().

    Raises:
        ValueError: if the JSON is not a serialized table
    """
    if isinstance(data, bytes):
        data = data.decode('utf-8')
    node = _node_from_dict(json.loads(data))
    if not isinstance(node, TableNode):
        raise ValueError("Serialized tree root must be a table")
    return node


def count_nodes(tree: VdfNode) -> int:
    """Count nodes in a tree, including the root."""
    if isinstance(tree, TableNode):
        return 1 + sum(count_nodes(child) for child in tree.entries.values())
    return 1
