"""
Unit tests for boiler characteristics.
"""

import pytest

from steam_boiler.config import MAX_PUMPS, BoilerCharacteristics
from steam_boiler.exceptions import ConfigurationError


class TestBoilerCharacteristics:
    """Test construction and validation."""

    def test_defaults(self):
        """Test the default boiler is valid."""
        characteristics = BoilerCharacteristics()
        assert characteristics.number_of_pumps == 4
        assert characteristics.target_level == 500.0

    def test_capacities_normalised(self):
        """Test integer capacities become floats."""
        characteristics = BoilerCharacteristics(pump_capacities=[5, 7])
        assert characteristics.pump_capacities == [5.0, 7.0]

    def test_no_pumps(self):
        """Test a boiler needs at least one pump."""
        with pytest.raises(ConfigurationError, match="at least one pump"):
            BoilerCharacteristics(pump_capacities=[])

    def test_too_many_pumps(self):
        """Test the pump count is bounded."""
        with pytest.raises(ConfigurationError, match="At most"):
            BoilerCharacteristics(pump_capacities=[1.0] * (MAX_PUMPS + 1))

    def test_negative_capacity(self):
        """Test negative pump capacities are rejected."""
        with pytest.raises(ConfigurationError, match="non-negative"):
            BoilerCharacteristics(pump_capacities=[10.0, -1.0])

    def test_negative_steam_rate(self):
        """Test negative steam rates are rejected."""
        with pytest.raises(ConfigurationError, match="steam rate"):
            BoilerCharacteristics(maximal_steam_rate=-1.0)

    def test_level_ordering(self):
        """Test the normal band must sit inside the limits."""
        with pytest.raises(ConfigurationError,
                           match="minimal_limit_level .* must not exceed minimal_normal_level"):
            BoilerCharacteristics(minimal_limit_level=450.0)

    def test_limit_above_capacity(self):
        """Test the upper limit must fit in the tank."""
        with pytest.raises(ConfigurationError, match="must not exceed capacity"):
            BoilerCharacteristics(maximal_limit_level=1200.0)

    def test_to_dict_round_trip(self):
        """Test dictionary conversion."""
        characteristics = BoilerCharacteristics(pump_capacities=[8.0, 12.0])
        data = characteristics.to_dict()
        assert data["pump_capacities"] == [8.0, 12.0]
        assert BoilerCharacteristics.from_dict(data) == characteristics


class TestLoading:
    """Test loading characteristics from mappings and files."""

    def test_from_dict_unknown_key(self):
        """Test typos are not silently ignored."""
        with pytest.raises(ConfigurationError, match="Unknown characteristics"):
            BoilerCharacteristics.from_dict({"capacty": 1000})

    def test_from_dict_not_a_mapping(self):
        """Test non-mapping input is rejected."""
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            BoilerCharacteristics.from_dict([1, 2, 3])

    def test_from_dict_bad_value(self):
        """Test unconvertible values become configuration errors."""
        with pytest.raises(ConfigurationError, match="Invalid characteristics"):
            BoilerCharacteristics.from_dict({"pump_capacities": ["fast"]})

    def test_from_yaml_top_level(self, tmp_path):
        """Test a document holding the characteristics directly."""
        path = tmp_path / "boiler.yaml"
        path.write_text("capacity: 2000\nmaximal_limit_level: 1900\npump_capacities: [20, 20]\n")

        characteristics = BoilerCharacteristics.from_yaml_file(path)
        assert characteristics.capacity == 2000
        assert characteristics.number_of_pumps == 2

    def test_from_yaml_nested(self, tmp_path):
        """Test a document with a characteristics section."""
        path = tmp_path / "boiler.yaml"
        path.write_text("characteristics:\n  pump_capacities: [5]\ncycle_duration: 5\n")

        characteristics = BoilerCharacteristics.from_yaml_file(path)
        assert characteristics.pump_capacities == [5.0]

    def test_from_yaml_empty(self, tmp_path):
        """Test an empty document gives the defaults."""
        path = tmp_path / "boiler.yaml"
        path.write_text("")
        assert BoilerCharacteristics.from_yaml_file(path) == BoilerCharacteristics()

    def test_from_yaml_missing_file(self, tmp_path):
        """Test missing files are reported as configuration errors."""
        with pytest.raises(ConfigurationError, match="Failed to load"):
            BoilerCharacteristics.from_yaml_file(tmp_path / "missing.yaml")

    def test_from_yaml_malformed(self, tmp_path):
        """Test YAML syntax errors are reported as configuration errors."""
        path = tmp_path / "boiler.yaml"
        path.write_text("capacity: [1000\n")
        with pytest.raises(ConfigurationError, match="Failed to load"):
            BoilerCharacteristics.from_yaml_file(path)
