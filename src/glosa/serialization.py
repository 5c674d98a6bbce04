"""Serialization of pass results to JSON-compatible dicts.

Hosts that run glosa out of process (a language-server style bridge, a
CLI feeding an editor plugin) need the decorations and folds as plain data.

All output is deterministic (sorted keys) so identical passes serialize to
identical strings.

Example:
    from glosa.serialization import to_json

    result = engine.update()
    payload = to_json(result)

Thread Safety:
    All functions are pure — safe to call from any thread.

"""

import json
from typing import Any

from glosa.engine import PassResult
from glosa.location import Position, Range
from glosa.nodes import FoldingRange, MarkdownHover, ResolvedDecoration
from glosa.snippet import InsertionRequest


def _position(pos: Position) -> dict[str, int]:
    return {"line": pos.line, "character": pos.character}


def _range(rng: Range) -> dict[str, Any]:
    return {"start": _position(rng.start), "end": _position(rng.end)}


def _hover(hover: MarkdownHover | None) -> dict[str, Any] | None:
    if hover is None:
        return None
    return {
        "value": hover.value,
        "isTrusted": hover.is_trusted,
        "supportThemeIcons": hover.support_theme_icons,
    }


def to_dict(obj: PassResult | ResolvedDecoration | FoldingRange | InsertionRequest | Range | Position) -> Any:
    """Convert a glosa result object to a JSON-compatible value.

    Args:
        obj: Pass result, decoration, folding range, insertion request,
            range or position

    Returns:
        Dict (or nested dicts/lists) using host-style camelCase keys.

    Raises:
        TypeError: For any other type.
    """
    match obj:
        case PassResult():
            return {
                "decorations": {
                    color: [to_dict(d) for d in batch] for color, batch in obj.batches.items()
                },
                "foldingRanges": [to_dict(f) for f in obj.folding_ranges],
                "linesScanned": obj.lines_scanned,
            }
        case ResolvedDecoration():
            return {
                "range": _range(obj.range),
                "color": obj.color,
                "hoverMessage": _hover(obj.hover),
            }
        case FoldingRange():
            return {"start": obj.start, "end": obj.end, "kind": obj.kind.value}
        case InsertionRequest():
            return {
                "position": _position(obj.position),
                "text": obj.text,
                "cursor": _position(obj.cursor),
            }
        case Range():
            return _range(obj)
        case Position():
            return _position(obj)
        case _:
            raise TypeError(f"Cannot serialize {type(obj).__name__}")


def to_json(obj: Any, *, indent: int | None = None) -> str:
    """Serialize a glosa result object to a JSON string.

    Args:
        obj: Anything to_dict accepts
        indent: JSON indentation (None for compact output)

    Returns:
        JSON string with sorted keys.
    """
    return json.dumps(to_dict(obj), indent=indent, sort_keys=True)


__all__ = [
    "to_dict",
    "to_json",
]
