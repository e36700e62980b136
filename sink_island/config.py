"""
Configuration settings for the Sink Island Detector
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger


TREE_SIZE_DEFAULT = 50
DEFAULT_MINIMUM_HIGHWAY_TYPE = "service"
FALLBACK_INSTRUCTIONS = ["Road is impossible to get out of."]

# Section name used when a config file carries several checks
CHECK_SECTION = "SinkIslandCheck"


class ConfigurationError(ValueError):
    """Raised when a configuration value cannot be used"""


@dataclass
class SinkIslandCheckConfig:
    """Options recognized by the sink island check"""
    # Maximum combined size of explored + candidate edges before a search gives up
    tree_size: int = TREE_SIZE_DEFAULT

    # Seeds below this road importance are never examined
    minimum_highway_type: str = DEFAULT_MINIMUM_HIGHWAY_TYPE

    # Instruction text attached to every finding (first entry is used)
    instructions: List[str] = field(default_factory=lambda: list(FALLBACK_INSTRUCTIONS))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "SinkIslandCheckConfig":
        """
        Build check options from dotted keys

        Recognized keys: ``tree.size``, ``minimum.highway.type`` and ``instructions``.
        Unknown keys are ignored. Values are not validated here, see validate_config.
        """
        config = cls()
        if "tree.size" in options:
            config.tree_size = options["tree.size"]
        if "minimum.highway.type" in options:
            config.minimum_highway_type = options["minimum.highway.type"]
        if "instructions" in options:
            instructions = options["instructions"]
            if isinstance(instructions, str):
                instructions = [instructions]
            config.instructions = list(instructions)
        return config


@dataclass
class APIConfig:
    """API endpoints and configuration"""
    # Overpass API (OSM)
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_timeout: int = 180

    # Request settings
    max_retries: int = 3
    retry_delay: float = 5.0
    min_request_interval: float = 2.0

    # User agent for API requests
    user_agent: str = "SinkIslandDetector/1.0"


@dataclass
class ScanConfig:
    """Scan configuration"""
    # Number of threads sharing one flag ledger (1 = sequential scan)
    workers: int = 1

    check: SinkIslandCheckConfig = field(default_factory=SinkIslandCheckConfig)
    api: APIConfig = field(default_factory=APIConfig)


# Global config instance
config = ScanConfig()


def get_config() -> ScanConfig:
    """Get global configuration"""
    return config


def load_config(path: str) -> ScanConfig:
    """
    Load a scan configuration from a JSON file

    The file either holds the check options at top level or nests them
    under a "SinkIslandCheck" object. A top-level "workers" key sets the
    scan parallelism.

    Raises:
        ConfigurationError: if the file cannot be read or parsed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read configuration {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration {path} must be a JSON object")

    options: Dict[str, Any] = raw.get(CHECK_SECTION, raw)
    scan_config = ScanConfig(check=SinkIslandCheckConfig.from_mapping(options))
    if "workers" in raw:
        scan_config.workers = raw["workers"]
    logger.debug(f"Loaded configuration from {path}: {scan_config.check}")
    return scan_config


def parse_tree_size(value: Any) -> int:
    """Coerce a tree size option to int, rejecting fractions and booleans"""
    if isinstance(value, bool):
        raise ConfigurationError(f"tree.size must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ConfigurationError(f"tree.size must be an integer, got {value!r}")


def validate_config(check_config: SinkIslandCheckConfig, workers: Optional[int] = None) -> None:
    """
    Validate that all configuration values are usable.
    Raises ConfigurationError listing every invalid value.
    """
    # Imported here to keep config importable from the tag module
    from .graph.tags import HighwayTag

    errors = []

    try:
        tree_size = parse_tree_size(check_config.tree_size)
        if tree_size <= 0:
            errors.append(f"tree.size must be positive, got {tree_size}")
        else:
            check_config.tree_size = tree_size
    except ConfigurationError as e:
        errors.append(str(e))

    minimum = check_config.minimum_highway_type
    if not isinstance(minimum, str) or not minimum:
        errors.append(f"minimum.highway.type must be a highway value, got {minimum!r}")
    else:
        try:
            HighwayTag.from_string(minimum)
        except ValueError:
            errors.append(f"minimum.highway.type is not a known highway type: {minimum!r}")

    if not check_config.instructions:
        errors.append("instructions must contain at least one entry")

    if workers is not None and (isinstance(workers, bool) or not isinstance(workers, int) or workers < 1):
        errors.append(f"workers must be a positive integer, got {workers!r}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)
