"""Unit tests for ValidationConfig."""

from pathlib import Path

import pydantic
import pytest

from scholarship_archive.validation import DEFAULT_CONFIG, ValidationConfig


class TestValidationConfig:
    """Tests for ValidationConfig."""

    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG.min_title_length == 5
        assert DEFAULT_CONFIG.error_weight == 0.5
        assert DEFAULT_CONFIG.warning_weight == 0.85
        assert DEFAULT_CONFIG.currency_codes is None

    @pytest.mark.parametrize("weight", [0.0, 1.0, 1.5, -0.1])
    def test_weights_must_be_in_open_unit_interval(self, weight: float) -> None:
        with pytest.raises(pydantic.ValidationError):
            ValidationConfig(error_weight=weight)

    def test_from_yaml_nested(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "validation:\n"
            "  min_title_length: 8\n"
            "  currency_codes: [USD, CAD]\n"
            "  warn_on_missing_amount: false\n"
            "scoring:\n"
            "  error_weight: 0.4\n"
            "  warning_weight: 0.9\n"
        )
        config = ValidationConfig.from_yaml(path)
        assert config.min_title_length == 8
        assert config.currency_codes == ["USD", "CAD"]
        assert config.warn_on_missing_amount is False
        assert config.error_weight == 0.4
        assert config.warning_weight == 0.9

    def test_from_yaml_flat(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("min_title_length: 3\nwarning_weight: 0.7\n")
        config = ValidationConfig.from_yaml(path)
        assert config.min_title_length == 3
        assert config.warning_weight == 0.7
        assert config.error_weight == 0.5

    def test_from_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert ValidationConfig.from_yaml(path).model_dump() == DEFAULT_CONFIG.model_dump()

    def test_amount_pattern_follows_codes(self) -> None:
        config = ValidationConfig(currency_codes=["CAD"])
        assert config.amount_pattern.match("CAD 100")
        assert not config.amount_pattern.match("EUR 100")
