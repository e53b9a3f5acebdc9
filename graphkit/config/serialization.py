"""JSON serialization and deserialization for analysis configs and option records."""

import json
from dataclasses import asdict
from typing import Any, TypeVar

from dacite import from_dict, Config as DaciteConfig

from graphkit.config.options import AnalysisConfig

T = TypeVar("T")

# strict=True rejects unknown keys (catches schema drift); cast=[tuple]
# converts JSON arrays back to tuples for tags.
_DACITE_CONFIG = DaciteConfig(
    cast=[tuple],
    check_types=True,
    strict=True,
)


def config_to_json(config: AnalysisConfig) -> str:
    """Serialize an AnalysisConfig to a JSON string.

    Uses sorted keys and 2-space indent for human readability and diffability.
    """
    return json.dumps(asdict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> AnalysisConfig:
    """Deserialize a JSON string to an AnalysisConfig.

    Missing keys fall back to the dataclass defaults, so a config file only
    needs the fields it overrides.
    """
    return config_from_dict(json.loads(json_str))


def config_to_dict(config: AnalysisConfig) -> dict[str, Any]:
    """Convert an AnalysisConfig to a plain dictionary."""
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> AnalysisConfig:
    """Reconstruct an AnalysisConfig from a plain dictionary."""
    return options_from_dict(AnalysisConfig, d)


def options_from_dict(options_class: type[T], d: dict[str, Any]) -> T:
    """Build any option record (e.g. LouvainOptions) from a plain dictionary.

    Raises:
        dacite.UnexpectedDataError: On unknown keys.
        dacite.WrongTypeError: On values of the wrong type.
        ValueError: When the record's own validation rejects a value.
    """
    return from_dict(data_class=options_class, data=d, config=_DACITE_CONFIG)
