"""
YAML configuration for the command-line tools.

Example config.yaml:

    providers:
      - id: 0
        prefix: "2001:4860::/32"
        name: Google
    output:
      format: json
    logging:
      level: INFO

Sections left out of the file keep their defaults. A ``providers`` list
replaces the built-in table entirely, so compressor and decompressor must be
given the same file.
"""

import copy
import ipaddress
from pathlib import Path
from typing import Optional, Tuple, Union

import yaml

from .core.errors import InvalidInputError
from .core.providers import PROVIDER_PATTERNS, ProviderPattern, build_table

OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG = {
    'providers': None,
    'output': {'format': 'text'},
    'logging': {'level': 'WARNING'},
}


def load_config(path: Optional[Union[str, Path]] = None) -> dict:
    """
    Loads a YAML config file merged over the defaults.

    Args:
        path: Config file, or None for the defaults only

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If path does not exist
        InvalidInputError: If the file is not a mapping or has bad values
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is None:
        return config

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidInputError(f"Invalid YAML in {path}: {e}") from None

    if not isinstance(loaded, dict):
        raise InvalidInputError(f"Config {path} must be a mapping")

    for key, value in loaded.items():
        if key not in config:
            raise InvalidInputError(f"Unknown config section: {key!r}")
        if isinstance(config[key], dict):
            if not isinstance(value, dict):
                raise InvalidInputError(f"Config section {key!r} must be a mapping")
            config[key].update(value)
        else:
            config[key] = value

    if config['output']['format'] not in OUTPUT_FORMATS:
        raise InvalidInputError(
            f"Unknown output format {config['output']['format']!r} "
            f"(expected one of {', '.join(OUTPUT_FORMATS)})"
        )

    level = str(config['logging']['level']).upper()
    if level not in LOG_LEVELS:
        raise InvalidInputError(
            f"Unknown logging level {config['logging']['level']!r} "
            f"(expected one of {', '.join(LOG_LEVELS)})"
        )
    config['logging']['level'] = level

    return config


def _parse_provider(entry) -> ProviderPattern:
    if not isinstance(entry, dict) or 'id' not in entry or 'prefix' not in entry:
        raise InvalidInputError(f"Provider entry needs 'id' and 'prefix': {entry!r}")

    try:
        network = ipaddress.IPv6Network(str(entry['prefix']))
    except ValueError as e:
        raise InvalidInputError(f"Invalid provider prefix {entry['prefix']!r}: {e}") from None
    if network.prefixlen != 32:
        raise InvalidInputError(
            f"Provider prefix {network} must be a /32, got /{network.prefixlen}"
        )

    try:
        pattern_id = int(entry['id'])
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid provider id: {entry['id']!r}") from None

    packed = network.network_address.packed
    prefix = ((packed[0] << 8) | packed[1], (packed[2] << 8) | packed[3])
    return ProviderPattern(pattern_id, prefix, str(entry.get('name', '')))


def providers_from_config(config: dict) -> Tuple[ProviderPattern, ...]:
    """Builds the provider table from config, or returns the built-in one."""
    entries = config.get('providers')
    if entries is None:
        return PROVIDER_PATTERNS
    if not isinstance(entries, list):
        raise InvalidInputError("Config 'providers' must be a list")
    return build_table(_parse_provider(entry) for entry in entries)
