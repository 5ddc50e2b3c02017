"""
Engine configuration loader (YAML-based).

Loads the engine configuration from YAML and merges it over the in-code
defaults. The result is read once by the codec context and never mutated.
"""
import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from checklist_engine.types.common import EngineConfig

logger = logging.getLogger(__name__)

# Defaults (should match those in engine_config.yaml)
DEFAULT_FILE_TYPE_MAP: Dict[str, List[str]] = {
    'binary-proprietary': ['.ace'],
    'structured-json': ['.gplt'],
    'generic-xml': ['.xml'],
    'native-json': ['.json'],
}

DEFAULT_SECTIONS: Dict[str, Dict[str, Any]] = {
    'binary': {
        'text_encoding': 'latin-1',
    },
    'container': {
        'archive': False,
        'indent': 2,
        'content_filename': 'content.json',
    },
    'markup': {
        'root_tag': 'checklistDocument',
        'attribute_prefix': '@',
        'text_key': '#text',
        'always_array': ['group', 'checklist', 'item'],
    },
    'native': {
        'indent': 2,
    },
}

DEFAULTS: Dict[str, Any] = {
    'version': 1,
    'file_type_map': DEFAULT_FILE_TYPE_MAP,
    **DEFAULT_SECTIONS,
}

CONFIG_PATH = Path(__file__).parent / 'engine_config.yaml'

# Global configuration cache
_cached_config: Optional[EngineConfig] = None


def load_config(config_path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Load configuration from a YAML file, merging with defaults.

    Args:
        config_path: Path to a YAML configuration file. Defaults to the
            engine_config.yaml shipped next to this module.

    Returns:
        Complete engine configuration

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ValueError: If the file does not hold a YAML mapping
    """
    path = Path(config_path) if config_path else CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        user_config = yaml.safe_load(f) or {}
    if not isinstance(user_config, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    version: int = int(user_config.get('version', DEFAULTS['version']))

    # Merge file type map
    file_type_map: Dict[str, List[str]] = {k: list(v) for k, v in DEFAULT_FILE_TYPE_MAP.items()}
    if 'file_type_map' in user_config and isinstance(user_config['file_type_map'], dict):
        for key, value in user_config['file_type_map'].items():
            if isinstance(value, list):
                file_type_map[key] = [str(ext).lower() for ext in value]

    # Merge codec sections key by key
    sections: Dict[str, Dict[str, Any]] = copy.deepcopy(DEFAULT_SECTIONS)
    for name, defaults in sections.items():
        overrides = user_config.get(name)
        if isinstance(overrides, dict):
            for key, value in overrides.items():
                if key in defaults:
                    defaults[key] = value
                else:
                    logger.warning(f"Ignoring unknown option {name}.{key} in {path}")

    result = EngineConfig(
        version=version,
        file_type_map=file_type_map,
        binary=sections['binary'],
        container=sections['container'],
        markup=sections['markup'],
        native=sections['native'],
    )
    logger.debug(f"Loaded engine configuration from {path}")
    return result


def get_config(reload: bool = False) -> EngineConfig:
    """
    Get the default engine configuration, using the cached copy if available.

    Args:
        reload: Force reload configuration from disk

    Returns:
        Engine configuration dictionary
    """
    global _cached_config

    if _cached_config is None or reload:
        logger.info("Loading checklist engine configuration")
        _cached_config = load_config()

    return _cached_config
