"""Structured command output.

Commands return one string. That string is either the ``CLEAR_TERMINAL``
sentinel, a JSON object tagged by ``type`` (one of the classes below), or
plain text. Actions build the typed values and call ``to_json`` once;
front ends call ``parse_output`` to get the typed value back.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Dict, Optional, Tuple, Type, Union

CLEAR_TERMINAL = "CLEAR_TERMINAL"

FILE = "file"
DIRECTORY = "directory"


@dataclass(frozen=True)
class TextOutput:
    type: ClassVar[str] = "text-output"
    content: str


@dataclass(frozen=True)
class ListOutput:
    type: ClassVar[str] = "list-output"
    items: Tuple[str, ...]


@dataclass(frozen=True)
class GridItem:
    name: str
    kind: str  # FILE or DIRECTORY


@dataclass(frozen=True)
class GridOutput:
    type: ClassVar[str] = "grid-output"
    items: Tuple[GridItem, ...]


@dataclass(frozen=True)
class GrepMatch:
    path: str
    line: int
    content: str
    keyword: str


@dataclass(frozen=True)
class GrepOutput:
    type: ClassVar[str] = "grep-output"
    matches: Tuple[GrepMatch, ...]


# Presentation-only payloads. The core emits them; front ends decide what to draw.
@dataclass(frozen=True)
class MatrixOutput:
    type: ClassVar[str] = "matrix-output"
    lines: int = 12
    columns: int = 32


@dataclass(frozen=True)
class CoffeeOutput:
    type: ClassVar[str] = "coffee-output"
    duration: int = 60000


@dataclass(frozen=True)
class MeltdownOutput:
    type: ClassVar[str] = "system-meltdown-output"


@dataclass(frozen=True)
class GameOutput:
    type: ClassVar[str] = "game-output"
    game: str
    state: Optional[Dict[str, Any]] = field(default=None)


StructuredOutput = Union[
    TextOutput, ListOutput, GridOutput, GrepOutput,
    MatrixOutput, CoffeeOutput, MeltdownOutput, GameOutput,
]

OUTPUT_TYPES: Dict[str, Type[Any]] = {
    cls.type: cls
    for cls in (TextOutput, ListOutput, GridOutput, GrepOutput,
                MatrixOutput, CoffeeOutput, MeltdownOutput, GameOutput)
}


def to_json(output: StructuredOutput) -> str:
    data = {"type": output.type}
    data.update(asdict(output))
    return json.dumps(data)


def _from_dict(data: Dict[str, Any]) -> StructuredOutput:
    cls = OUTPUT_TYPES[data["type"]]
    if cls is TextOutput:
        return TextOutput(content=str(data["content"]))
    if cls is ListOutput:
        return ListOutput(items=tuple(str(i) for i in data["items"]))
    if cls is GridOutput:
        return GridOutput(items=tuple(GridItem(name=i["name"], kind=i["kind"]) for i in data["items"]))
    if cls is GrepOutput:
        return GrepOutput(matches=tuple(
            GrepMatch(path=m["path"], line=int(m["line"]), content=m["content"], keyword=m["keyword"])
            for m in data["matches"]
        ))
    if cls is MatrixOutput:
        return MatrixOutput(lines=int(data.get("lines", 12)), columns=int(data.get("columns", 32)))
    if cls is CoffeeOutput:
        return CoffeeOutput(duration=int(data.get("duration", 60000)))
    if cls is MeltdownOutput:
        return MeltdownOutput()
    return GameOutput(game=str(data["game"]), state=data.get("state"))


def parse_output(raw: str) -> Union[StructuredOutput, str]:
    """Return the structured value carried by ``raw``, or ``raw`` itself.

    Anything that is not a JSON object with a known ``type`` (including the
    clear sentinel) comes back unchanged, so callers can always fall back to
    printing it.
    """
    if not raw.startswith("{"):
        return raw
    try:
        data = json.loads(raw)
    except ValueError:
        return raw
    if not isinstance(data, dict) or data.get("type") not in OUTPUT_TYPES:
        return raw
    try:
        return _from_dict(data)
    except (KeyError, TypeError, ValueError):
        return raw
