"""Tests for G-code metadata extraction."""

from __future__ import annotations

import math

import pytest

from orca_mcp.parsing import TAIL_SIZE, GcodeMetadata, parse_gcode_metadata


class TestWellKnownFields:
    """Tests for the five typed fields."""

    def test_sample_file(self, sample_gcode: str) -> None:
        """Test every typed field is read from a typical trailer."""
        meta = parse_gcode_metadata(sample_gcode)

        assert meta.filament_used_mm == pytest.approx(12345.67)
        assert meta.filament_used_g == 37.5
        assert meta.filament_cost == pytest.approx(1.23)
        assert meta.layer_count == 150
        assert meta.estimated_time == "2h 15m 30s"

    def test_grams_and_layers_scenario(self) -> None:
        """Test the two-line trailer yields mass and layer count."""
        meta = parse_gcode_metadata("; filament used [g] = 37.5\n; total layers count = 150")

        assert meta.to_dict() == {"filamentUsedG": 37.5, "layerCount": 150}

    def test_case_insensitive(self) -> None:
        """Test keys match regardless of case."""
        meta = parse_gcode_metadata(";FILAMENT USED [MM]=10\n;Total Layers Count = 7")
        assert meta.filament_used_mm == 10.0
        assert meta.layer_count == 7

    def test_estimated_time_with_mode(self) -> None:
        """Test the time pattern tolerates a suffix before '='."""
        meta = parse_gcode_metadata("; estimated printing time (normal mode) = 1h 2m 3s")
        assert meta.estimated_time == "1h 2m 3s"

    def test_malformed_number_is_nan(self) -> None:
        """Test an unparsable numeric value yields nan."""
        meta = parse_gcode_metadata("; filament used [mm] = 1.2.3")
        assert math.isnan(meta.filament_used_mm)

    def test_well_known_key_not_stored_generically(self) -> None:
        """Test a matched well-known line is not also captured as a generic key."""
        meta = parse_gcode_metadata("; filament cost = 2.5")
        assert meta.extras == {}

    def test_aliases(self) -> None:
        """Test the model serializes with camelCase names."""
        meta = GcodeMetadata.model_validate({"estimatedTime": "5m", "layerCount": 3})
        assert meta.estimated_time == "5m"
        assert meta.to_dict() == {"estimatedTime": "5m", "layerCount": 3}


class TestGenericKeys:
    """Tests for the generic key = value fallback."""

    def test_generic_key_normalized(self) -> None:
        """Test keys are lowercased with whitespace collapsed to underscores."""
        meta = parse_gcode_metadata("; Nozzle  Diameter = 0.4\n; layer_height = 0.2")
        assert meta.extras == {"nozzle_diameter": "0.4", "layer_height": "0.2"}

    def test_first_occurrence_wins(self) -> None:
        """Test later duplicates of a generic key are dropped."""
        meta = parse_gcode_metadata("; printer model = A\n; Printer Model = B")
        assert meta.extras == {"printer_model": "A"}

    def test_non_comment_lines_ignored(self) -> None:
        """Test lines without the comment marker are skipped."""
        meta = parse_gcode_metadata("G1 X10 = 5\nfoo = bar\n  ; bed_temperature = 60  ")
        assert meta.extras == {"bed_temperature": "60"}

    def test_lines_without_key_shape_ignored(self) -> None:
        """Test comments that are not key = value are skipped."""
        meta = parse_gcode_metadata("; just a comment\n; = orphan\n; 1abc = x")
        assert meta.extras == {}
        assert meta.to_dict() == {}


class TestTotality:
    """Extraction never fails and only reads the tail."""

    @pytest.mark.parametrize("text", ["", "\n\n", ";", "; =", "\x00\x01", "; total layers count = "])
    def test_any_input(self, text: str) -> None:
        """Test odd inputs produce a result."""
        assert isinstance(parse_gcode_metadata(text), GcodeMetadata)

    def test_idempotent(self, sample_gcode: str) -> None:
        """Test repeated extraction yields the same result."""
        assert parse_gcode_metadata(sample_gcode) == parse_gcode_metadata(sample_gcode)

    def test_only_tail_examined(self) -> None:
        """Test metadata before the final window is ignored."""
        text = "; total layers count = 99\n" + ("G1 X1\n" * TAIL_SIZE) + "; filament cost = 3"
        meta = parse_gcode_metadata(text)

        assert meta.layer_count is None
        assert meta.filament_cost == 3.0
