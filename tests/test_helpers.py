"""Tests for level encoding and input parsing helpers."""
import json

import pytest
from climbgen.models.level import BranchConfig, HeightFieldConfig
from climbgen.models.world import baseline_height_field, baseline_voxel_world
from climbgen.utils.helpers import (
    apply_config_overrides,
    decode_levels,
    encode_levels,
    format_world_for_display,
    parse_sequence_input,
    validate_level_json,
)


class TestEncoding:
    """Test cases for the level file format."""

    def test_empty(self):
        assert encode_levels([]) == "[]"

    def test_keys_sorted(self):
        text = encode_levels([baseline_height_field(), baseline_voxel_world(2)])
        data = json.loads(text)
        for level in data:
            assert list(level.keys()) == sorted(level.keys())
            assert list(level["start"].keys()) == sorted(level["start"].keys())

    def test_voxel_shape(self):
        level = json.loads(encode_levels([baseline_voxel_world(3)]))[0]
        assert set(level) == {"depth", "height", "id", "layers", "start", "width"}
        assert level["id"] == 3
        assert level["start"] == {"x": 0, "y": 4, "z": 0}
        assert len(level["layers"]) == level["height"]

    def test_height_field_shape(self):
        level = json.loads(encode_levels([baseline_height_field()]))[0]
        assert set(level) == {"depth", "heights", "id", "start", "width"}

    def test_pretty_printed(self):
        assert "\n  " in encode_levels([baseline_height_field()])

    def test_decode_round_trip(self):
        worlds = [baseline_height_field(1), baseline_voxel_world(2)]
        decoded, error = decode_levels(encode_levels(worlds))
        assert error is None
        assert [w.to_dict() for w in decoded] == [w.to_dict() for w in worlds]

    def test_decode_errors(self):
        worlds, error = decode_levels("{not json")
        assert worlds is None
        assert "Invalid JSON" in error

        worlds, error = decode_levels('{"id": 1}')
        assert worlds is None
        assert error == "Expected a JSON array of levels"


class TestLevelValidation:
    """Test cases for validate_level_json."""

    def test_valid_levels(self):
        assert validate_level_json(baseline_voxel_world().to_dict()) == (True, None)
        assert validate_level_json(baseline_height_field().to_dict()) == (True, None)

    def test_missing_grid(self):
        ok, error = validate_level_json({"width": 2, "depth": 2, "start": {"x": 0, "y": 0}})
        assert not ok
        assert "layers" in error

    def test_wrong_row_count(self):
        level = baseline_height_field().to_dict()
        level["heights"] = level["heights"][:3]
        ok, error = validate_level_json(level)
        assert not ok
        assert "5 rows" in error

    def test_start_outside(self):
        level = baseline_voxel_world().to_dict()
        level["start"]["z"] = 9
        ok, _ = validate_level_json(level)
        assert not ok

    def test_negative_height(self):
        level = baseline_height_field().to_dict()
        level["heights"][0][0] = -1
        ok, _ = validate_level_json(level)
        assert not ok


class TestSequenceParsing:
    """Test cases for parse_sequence_input."""

    @pytest.mark.parametrize("text,codes", [
        ("5, 5, 5, 5", [5, 5, 5, 5]),
        ("5\n5\n5", [5, 5, 5]),
        ("[1, 2, 15]", [1, 2, 15]),
        ("[[1, 0, 1], [0, 1, 0]]", [5, 12]),
        ("1 0 1\n0 1 0", [5, 12]),
        ("(1, 0, 1)\n(-1, 0, -2)", [5, 3]),
        ("1 0 1\n7", [1, 0, 1, 7]),
    ])
    def test_accepted(self, text, codes):
        assert parse_sequence_input(text) == (codes, None)

    @pytest.mark.parametrize("text,message", [
        ("", "Enter codes or vectors."),
        ("   ", "Enter codes or vectors."),
        ("abc", "No numbers found."),
        ("16", "Code out of range: 16."),
        ("[]", "Sequence is empty."),
        ("[[1, 1, 1]]", "Vectors must match the 16 allowed steps."),
        ("[[1, 0]]", "Vector JSON must be [[dx, dy, dz], ...]."),
    ])
    def test_rejected(self, text, message):
        assert parse_sequence_input(text) == (None, message)


class TestConfigOverrides:
    """Test cases for apply_config_overrides."""

    def test_known_fields_replaced(self):
        config = apply_config_overrides(BranchConfig(), {"steps": 6, "max_height": 3, "width": None})
        assert config.steps == 6
        assert config.width == BranchConfig().width

    def test_seed(self):
        config = apply_config_overrides(HeightFieldConfig(), None, seed=5)
        assert config.seed == 5

    def test_original_untouched(self):
        original = HeightFieldConfig()
        apply_config_overrides(original, {"width": 4})
        assert original.width == 9


def test_format_world_for_display():
    text = format_world_for_display(baseline_voxel_world())
    assert text.startswith("Level 1 (5x5x4):")
    assert "S" in text
    assert "Layer 3:" in text
