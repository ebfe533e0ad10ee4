"""
Tests for inventory valuation configuration.

Verifies defaults, coercion, validation, and loading from the YAML config
set.  NO database required.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from garage_config import get_module_config
from garage_engines.valuation import GapFillMethod
from garage_kernel.exceptions import ConfigurationError
from garage_modules.inventory_valuation.config import InventoryValuationConfig


class TestInventoryValuationConfig:

    def test_defaults(self):
        config = InventoryValuationConfig.with_defaults()
        assert config.quantity_decimal_places == 2
        assert config.cost_decimal_places == 4
        assert config.money_decimal_places == 2
        assert config.cost_epsilon == Decimal("0.0001")
        assert config.gap_fill_method is GapFillMethod.AVERAGE_COST
        assert config.history_entries == 3
        assert config.empty_history_label == "-"
        assert config.uncategorized_label == "Uncategorized"

    def test_string_values_coerced(self):
        config = InventoryValuationConfig(cost_epsilon="0.01", gap_fill_method="standard_cost")
        assert config.cost_epsilon == Decimal("0.01")
        assert config.gap_fill_method is GapFillMethod.STANDARD_COST

    def test_unknown_gap_fill_method(self):
        with pytest.raises(ConfigurationError, match="gap_fill_method"):
            InventoryValuationConfig(gap_fill_method="lifo")

    def test_invalid_epsilon(self):
        with pytest.raises(ConfigurationError, match="cost_epsilon"):
            InventoryValuationConfig(cost_epsilon="abc")

    def test_negative_epsilon(self):
        with pytest.raises(ConfigurationError, match="cost_epsilon"):
            InventoryValuationConfig(cost_epsilon=Decimal("-1"))

    def test_negative_places(self):
        with pytest.raises(ConfigurationError, match="money_decimal_places"):
            InventoryValuationConfig(money_decimal_places=-1)

    def test_negative_history_entries(self):
        with pytest.raises(ConfigurationError, match="history_entries"):
            InventoryValuationConfig(history_entries=-1)

    def test_empty_filename_prefix(self):
        with pytest.raises(ConfigurationError, match="export_filename_prefix"):
            InventoryValuationConfig(export_filename_prefix="")

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            InventoryValuationConfig(history_entries=-5)

    def test_from_dict(self):
        config = InventoryValuationConfig.from_dict({"history_entries": 5, "gap_fill_method": "none"})
        assert config.history_entries == 5
        assert config.gap_fill_method is GapFillMethod.NONE

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError, match="unknown settings: currency"):
            InventoryValuationConfig.from_dict({"currency": "USD"})


class TestModuleConfigSet:

    def test_shipped_set_matches_defaults(self):
        config = InventoryValuationConfig.from_dict(get_module_config("inventory_valuation"))
        assert config == InventoryValuationConfig()

    def test_missing_set(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_module_config("inventory_valuation", config_dir=tmp_path)

    def test_module_name_mismatch(self, tmp_path):
        (tmp_path / "inventory_valuation.yaml").write_text("module: payroll\nsettings: {}\n")
        with pytest.raises(ValueError, match="payroll"):
            get_module_config("inventory_valuation", config_dir=tmp_path)

    def test_settings_must_be_mapping(self, tmp_path):
        (tmp_path / "inventory_valuation.yaml").write_text("settings:\n  - a\n")
        with pytest.raises(ValueError, match="settings"):
            get_module_config("inventory_valuation", config_dir=tmp_path)

    def test_document_must_be_mapping(self, tmp_path):
        (tmp_path / "inventory_valuation.yaml").write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            get_module_config("inventory_valuation", config_dir=tmp_path)

    def test_returns_copy(self, tmp_path):
        (tmp_path / "inventory_valuation.yaml").write_text(
            "module: inventory_valuation\nversion: 2\nsettings:\n  history_entries: 1\n"
        )
        settings = get_module_config("inventory_valuation", config_dir=tmp_path)
        settings["history_entries"] = 9
        assert get_module_config("inventory_valuation", config_dir=tmp_path) == {"history_entries": 1}

    def test_config_trace_logged(self, tmp_path, captured_logs):
        (tmp_path / "inventory_valuation.yaml").write_text(
            "module: inventory_valuation\nversion: 2\nsettings:\n  history_entries: 1\n"
        )
        get_module_config("inventory_valuation", config_dir=tmp_path)

        traces = [r for r in captured_logs() if r["message"] == "GARAGE_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["config_version"] == 2
        assert traces[0]["setting_count"] == 1
