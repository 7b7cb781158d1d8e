"""
Configuration for the filter library.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class FilterConfig:
    """Runtime switches read from the environment"""

    # Log every degrade-to-absent at WARNING instead of DEBUG
    diagnostics: bool = False

    # Enumerate mappings sorted by key instead of insertion order
    sort_mapping_keys: bool = False

    @classmethod
    def from_env(cls) -> 'FilterConfig':
        return cls(
            diagnostics=_env_flag('TWIGFILTERS_DIAGNOSTICS'),
            sort_mapping_keys=_env_flag('TWIGFILTERS_SORT_MAPPING_KEYS'),
        )


_config: Optional[FilterConfig] = None


def get_config() -> FilterConfig:
    """Return the configuration singleton"""
    global _config
    if _config is None:
        _config = FilterConfig.from_env()
    return _config


def set_config(config: Optional[FilterConfig]) -> None:
    """Replace the singleton; None forces a reload from the environment."""
    global _config
    _config = config
