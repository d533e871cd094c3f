"""Model serialization: JSON round-trip for BlockModel and decoration export.

Converts models and surfaced records to/from JSON-compatible dicts. Useful
for:
- Handing models to hosts written in other languages (web views, editors)
- Persisting the model of a finished transcript next to its text
- Debugging and inspection

All output is deterministic (sorted keys) for cache-key stability.

Example:
    from bloques import resolve
    from bloques.serialization import to_json, from_json

    model = resolve("# Hello **World**")
    restored = from_json(to_json(model))
    assert model == restored

Thread Safety:
    All functions are pure, safe to call from any thread.

"""

import json
from collections.abc import Iterable
from dataclasses import fields
from typing import Any

from bloques.location import Span
from bloques.model import BlockModel
from bloques.nodes import (
    Bold,
    Header,
    InlineCode,
    Italic,
    Link,
    Node,
    SourceBlock,
    Strikethrough,
)
from bloques.renderers.decorations import Decoration

# Registry of record type names to classes for deserialization
_NODE_TYPES: dict[str, type[Node]] = {
    "SourceBlock": SourceBlock,
    "Header": Header,
    "Link": Link,
    "Bold": Bold,
    "Italic": Italic,
    "Strikethrough": Strikethrough,
    "InlineCode": InlineCode,
}


def _span_to_list(span: Span) -> list[int]:
    return [span.start, span.end]


def _span_from_list(value: Any) -> Span:
    if not isinstance(value, list) or len(value) != 2:
        msg = f"Expected [start, end] span, got {value!r}"
        raise ValueError(msg)
    return Span(value[0], value[1])


def node_to_dict(node: Node) -> dict[str, Any]:
    """Convert a surfaced record to a JSON-compatible dict.

    Includes a ``_type`` discriminator field; every span field is written
    as a ``[start, end]`` pair.
    """
    result: dict[str, Any] = {"_type": type(node).__name__}
    for f in fields(node):
        result[f.name] = _span_to_list(getattr(node, f.name))
    return result


def node_from_dict(data: dict[str, Any]) -> Node:
    """Reconstruct a surfaced record from a dict.

    Raises:
        ValueError: If ``_type`` is missing or unknown, or a span is malformed.
    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized record"
        raise ValueError(msg)

    node_cls = _NODE_TYPES.get(type_name)
    if node_cls is None:
        msg = f"Unknown record type: {type_name!r}"
        raise ValueError(msg)

    kwargs = {f.name: _span_from_list(data[f.name]) for f in fields(node_cls)}
    return node_cls(**kwargs)


def to_dict(model: BlockModel) -> dict[str, Any]:
    """Convert a BlockModel to a JSON-compatible dict."""
    return {
        "_type": "BlockModel",
        "blocks": [node_to_dict(block) for block in model.blocks],
        "annotations": [node_to_dict(annotation) for annotation in model.annotations],
        "length": model.length,
        "version": model.version,
        "unterminated_at": model.unterminated_at,
    }


def from_dict(data: dict[str, Any]) -> BlockModel:
    """Reconstruct a BlockModel from a dict (as produced by to_dict).

    Raises:
        ValueError: If the dict does not describe a BlockModel.
    """
    if data.get("_type") != "BlockModel":
        msg = f"Expected BlockModel, got {data.get('_type')!r}"
        raise ValueError(msg)

    blocks = tuple(node_from_dict(item) for item in data.get("blocks", ()))
    annotations = tuple(node_from_dict(item) for item in data.get("annotations", ()))
    if not all(isinstance(block, SourceBlock) for block in blocks):
        msg = "Only SourceBlock records may appear under 'blocks'"
        raise ValueError(msg)
    if any(isinstance(annotation, SourceBlock) for annotation in annotations):
        msg = "SourceBlock records may not appear under 'annotations'"
        raise ValueError(msg)

    return BlockModel(
        blocks=blocks,  # type: ignore[arg-type]
        annotations=annotations,  # type: ignore[arg-type]
        length=data.get("length", 0),
        version=data.get("version", 0),
        unterminated_at=data.get("unterminated_at"),
    )


def to_json(model: BlockModel, *, indent: int | None = None) -> str:
    """Serialize a BlockModel to a JSON string.

    Args:
        model: Model to serialize.
        indent: JSON indentation level (None for compact).
    """
    return json.dumps(to_dict(model), sort_keys=True, indent=indent)


def from_json(data: str) -> BlockModel:
    """Deserialize a BlockModel from a JSON string.

    Raises:
        ValueError: If the JSON doesn't represent a BlockModel.
    """
    return from_dict(json.loads(data))


def decoration_to_dict(decoration: Decoration) -> dict[str, Any]:
    """Convert a decoration to a flat dict a display host can apply."""
    result: dict[str, Any] = {
        "kind": decoration.kind.name.lower(),
        "span": _span_to_list(decoration.span),
    }
    if decoration.text is not None:
        result["text"] = decoration.text
    if decoration.face is not None:
        result["face"] = decoration.face
    if decoration.binding is not None:
        result["command"] = decoration.binding.command
        result["argument"] = decoration.binding.argument
    return result


def decorations_to_json(decorations: Iterable[Decoration], *, indent: int | None = None) -> str:
    """Serialize decorations, in buffer order, to a JSON array."""
    ordered = sorted(decorations, key=Decoration.sort_key)
    return json.dumps([decoration_to_dict(d) for d in ordered], sort_keys=True, indent=indent)
