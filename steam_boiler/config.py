"""
Boiler Characteristics

Static description of the boiler a controller is built for: tank capacity,
the normal and limit level bands, the steam rate envelope and the pumps.
Characteristics are immutable for the lifetime of a controller.
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from steam_boiler.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Pump subsets are enumerated exhaustively, 2**n candidates per cycle
MAX_PUMPS = 20


@dataclass(frozen=True)
class BoilerCharacteristics:
    """Configuration for one steam boiler.

    Levels are in litres, the steam rate and pump capacities in litres per
    second.
    """

    capacity: float = 1000.0                         # Tank capacity
    minimal_limit_level: float = 50.0                # Below this: emergency stop
    maximal_limit_level: float = 950.0               # Above this: emergency stop
    minimal_normal_level: float = 400.0              # Lower bound of normal operation
    maximal_normal_level: float = 600.0              # Upper bound of normal operation
    maximal_steam_rate: float = 10.0                 # Maximum steam output rate
    pump_capacities: List[float] = field(default_factory=lambda: [10.0, 10.0, 10.0, 10.0])

    def __post_init__(self):
        object.__setattr__(self, "pump_capacities", [float(c) for c in self.pump_capacities])

        if not self.pump_capacities:
            raise ConfigurationError("A boiler needs at least one pump")
        if len(self.pump_capacities) > MAX_PUMPS:
            raise ConfigurationError(
                f"At most {MAX_PUMPS} pumps are supported, got {len(self.pump_capacities)}"
            )
        if any(c < 0 for c in self.pump_capacities):
            raise ConfigurationError(f"Pump capacities must be non-negative: {self.pump_capacities}")
        if self.maximal_steam_rate < 0:
            raise ConfigurationError(f"Maximal steam rate must be non-negative: {self.maximal_steam_rate}")

        levels = [
            ("0", 0.0),
            ("minimal_limit_level", self.minimal_limit_level),
            ("minimal_normal_level", self.minimal_normal_level),
            ("maximal_normal_level", self.maximal_normal_level),
            ("maximal_limit_level", self.maximal_limit_level),
            ("capacity", self.capacity),
        ]
        for (low_name, low), (high_name, high) in zip(levels, levels[1:]):
            if low > high:
                raise ConfigurationError(f"{low_name} ({low}) must not exceed {high_name} ({high})")

    @property
    def number_of_pumps(self) -> int:
        return len(self.pump_capacities)

    @property
    def target_level(self) -> float:
        """Midpoint of the normal band, the level normal operation steers toward."""
        return (self.minimal_normal_level + self.maximal_normal_level) / 2.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoilerCharacteristics":
        """Build characteristics from a mapping.

        Unknown keys are rejected so that typos in configuration files do not
        silently fall back to defaults.

        Args:
            data: Mapping of field names to values

        Returns:
            Validated characteristics

        Raises:
            ConfigurationError: If keys are unknown or values invalid
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"Characteristics must be a mapping, got {type(data).__name__}")

        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown characteristics: {sorted(unknown)}")

        try:
            return cls(**data)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid characteristics: {e}")

    @classmethod
    def from_yaml_file(cls, path: Union[str, Path]) -> "BoilerCharacteristics":
        """Load characteristics from a YAML file.

        The characteristics may sit at the top level of the document or
        under a ``characteristics`` key.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load characteristics from {path}: {e}")

        if isinstance(data, dict) and "characteristics" in data:
            data = data["characteristics"]

        characteristics = cls.from_dict(data or {})
        logger.debug(f"Loaded characteristics from {path}: {characteristics}")
        return characteristics
