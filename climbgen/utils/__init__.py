"""Utility helpers for level encoding and input parsing."""
from .helpers import (
    apply_config_overrides,
    decode_levels,
    encode_levels,
    format_world_for_display,
    parse_sequence_input,
    validate_level_json,
    world_from_dict,
)

__all__ = [
    "apply_config_overrides",
    "decode_levels",
    "encode_levels",
    "format_world_for_display",
    "parse_sequence_input",
    "validate_level_json",
    "world_from_dict",
]
