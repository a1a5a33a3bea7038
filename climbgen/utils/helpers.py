"""Utility helper functions."""
import dataclasses
import json
import re
from typing import Dict, Any, Iterable, List, Optional, Tuple, TypeVar

from ..core.codec import CODE_COUNT, sequence_from_vectors
from ..models.world import Cell, Column, HeightFieldWorld, VoxelWorld, World

_INT_TOKEN = re.compile(r"-?\d+")

ConfigT = TypeVar("ConfigT")


def encode_levels(worlds: Iterable[World]) -> str:
    """
    Serialise levels as a pretty-printed JSON array with sorted keys.

    Args:
        worlds: Levels to encode.

    Returns:
        JSON text; ``"[]"`` for no levels.
    """
    payload = [world.to_dict() for world in worlds]
    if not payload:
        return "[]"
    return json.dumps(payload, sort_keys=True, indent=2)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_grid(grid: Any, rows: int, cols: int, name: str) -> Optional[str]:
    if not isinstance(grid, list) or len(grid) != rows:
        return f"'{name}' must have {rows} rows"
    for y, row in enumerate(grid):
        if not isinstance(row, list) or len(row) != cols:
            return f"'{name}[{y}]' must have {cols} entries"
        for value in row:
            if not _is_int(value) or value < 0:
                return f"'{name}[{y}]' must contain non-negative integers"
    return None


def validate_level_json(level_json: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate level JSON structure.

    Both the voxel shape (``layers``) and the height-field shape
    (``heights``) are accepted.

    Args:
        level_json: Level data to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not isinstance(level_json, dict):
        return False, "Level must be an object"

    for field in ("width", "depth"):
        value = level_json.get(field)
        if not _is_int(value) or value < 1:
            return False, f"'{field}' must be a positive integer"
    width = level_json["width"]
    depth = level_json["depth"]

    start = level_json.get("start")
    if not isinstance(start, dict) or not _is_int(start.get("x")) or not _is_int(start.get("y")):
        return False, "'start' must be an object with integer 'x' and 'y'"
    if not (0 <= start["x"] < width and 0 <= start["y"] < depth):
        return False, "'start' is outside the level"

    if "layers" in level_json:
        height = level_json.get("height")
        if not _is_int(height) or height < 1:
            return False, "'height' must be a positive integer"
        if not _is_int(start.get("z")) or not 0 <= start["z"] < height:
            return False, "'start.z' must be an integer inside the level"
        layers = level_json["layers"]
        if not isinstance(layers, list) or len(layers) != height:
            return False, f"'layers' must have {height} entries"
        for z, layer in enumerate(layers):
            error = _check_grid(layer, depth, width, f"layers[{z}]")
            if error:
                return False, error
        return True, None

    if "heights" in level_json:
        error = _check_grid(level_json["heights"], depth, width, "heights")
        if error:
            return False, error
        return True, None

    return False, "Level needs either 'layers' or 'heights'"


def world_from_dict(level_json: Dict[str, Any]) -> World:
    """Build a world from a level dict that passed ``validate_level_json``."""
    level_id = level_json.get("id", 1)
    start = level_json["start"]
    if "layers" in level_json:
        return VoxelWorld.from_layers(
            level_id,
            Cell(start["x"], start["y"], start["z"]),
            level_json["layers"],
        )
    return HeightFieldWorld(
        id=level_id,
        width=level_json["width"],
        depth=level_json["depth"],
        start=Column(start["x"], start["y"]),
        heights=level_json["heights"],
    )


def decode_levels(text: str) -> Tuple[Optional[List[World]], Optional[str]]:
    """
    Parse a JSON array of levels.

    Returns:
        Tuple of (worlds, error_message); worlds is None on any error.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return None, f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}"
    if not isinstance(data, list):
        return None, "Expected a JSON array of levels"

    worlds: List[World] = []
    for index, level_json in enumerate(data):
        ok, error = validate_level_json(level_json)
        if not ok:
            return None, f"Level {index}: {error}"
        worlds.append(world_from_dict(level_json))
    return worlds, None


def validate_codes(codes: List[int]) -> Tuple[Optional[List[int]], Optional[str]]:
    """Reject empty sequences and codes outside the alphabet."""
    if not codes:
        return None, "Sequence is empty."
    for code in codes:
        if not _is_int(code) or not 0 <= code < CODE_COUNT:
            return None, f"Code out of range: {code}."
    return list(codes), None


def parse_sequence_input(text: str) -> Tuple[Optional[List[int]], Optional[str]]:
    """
    Parse user-supplied move codes.

    Accepts a JSON list of codes, a JSON list of ``[dx, dy, dz]`` triples,
    one triple per line, or any run of integers separated by other
    characters.

    Returns:
        Tuple of (codes, error_message).
    """
    trimmed = text.strip()
    if not trimmed:
        return None, "Enter codes or vectors."

    try:
        data = json.loads(trimmed)
    except json.JSONDecodeError:
        data = None

    if isinstance(data, list):
        if all(_is_int(item) for item in data):
            return validate_codes(data)
        if all(isinstance(item, list) for item in data):
            if any(len(item) != 3 or not all(_is_int(v) for v in item) for item in data):
                return None, "Vector JSON must be [[dx, dy, dz], ...]."
            codes = sequence_from_vectors(data)
            if codes is None:
                return None, "Vectors must match the 16 allowed steps."
            return validate_codes(codes)

    parsed_lines = []
    for line in trimmed.splitlines():
        numbers = [int(token) for token in _INT_TOKEN.findall(line)]
        if numbers:
            parsed_lines.append(numbers)
    if not parsed_lines:
        return None, "No numbers found."

    if all(len(numbers) == 3 for numbers in parsed_lines):
        codes = sequence_from_vectors(parsed_lines)
        if codes is None:
            return None, "Vectors must match the 16 allowed steps."
        return validate_codes(codes)

    return validate_codes([code for numbers in parsed_lines for code in numbers])


def format_world_for_display(world: World) -> str:
    """
    Format a level for human-readable display.

    Layers are printed top to bottom; ``#`` is a solid block, ``o`` a block
    that can be stood on, ``S`` the start and ``.`` empty space.

    Args:
        world: Level to format.

    Returns:
        Formatted string representation.
    """
    start = world.start
    lines = [f"Level {world.id} ({world.width}x{world.depth}x{world.height}):", "-" * 40]
    for z in range(world.height - 1, -1, -1):
        lines.append(f"\nLayer {z}:")
        for y in range(world.depth):
            row = []
            for x in range(world.width):
                if (x, y, z) == (start.x, start.y, start.z):
                    row.append("S")
                elif world.is_standable(x, y, z):
                    row.append("o")
                elif world.is_solid(x, y, z):
                    row.append("#")
                else:
                    row.append(".")
            lines.append("  " + " ".join(row))
    return "\n".join(lines)


def apply_config_overrides(
    config: ConfigT, overrides: Optional[Dict[str, Any]] = None, seed: Optional[int] = None
) -> ConfigT:
    """
    Copy a generation config with the given fields replaced.

    Keys the config does not have and ``None`` values are ignored, so one
    override dict can serve every generator variant.
    """
    names = {f.name for f in dataclasses.fields(config)}
    changes = {
        key: value for key, value in (overrides or {}).items()
        if key in names and value is not None
    }
    if seed is not None:
        changes["seed"] = seed
    return dataclasses.replace(config, **changes)
