"""Configuration schema and loading for allocation request files.

Public API:
    - AllocationConfiguration: Root configuration model
    - load_config / load_config_from_dict: Load and validate a request
    - ConfigError: Exception for configuration errors
    - config_to_*: Convert configuration into domain objects

Example:
    >>> from pathlib import Path
    >>> from stockalloc.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("requisition-42.json"))
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from stockalloc.application.config.adapter import (
    config_to_line,
    config_to_pieces,
    config_to_preselection,
    config_to_profile,
    config_to_settings,
)
from stockalloc.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from stockalloc.application.config.schema import (
    SUPPORTED_VERSIONS,
    AllocationConfiguration,
    AllocationSettingsConfig,
    CutPlanConfig,
    PreselectionConfig,
    RequisitionLineConfig,
    StockPieceConfig,
    StockProfileConfig,
)

__all__ = [
    "SUPPORTED_VERSIONS",
    "AllocationConfiguration",
    "AllocationSettingsConfig",
    "ConfigError",
    "CutPlanConfig",
    "PreselectionConfig",
    "RequisitionLineConfig",
    "StockPieceConfig",
    "StockProfileConfig",
    "config_to_line",
    "config_to_pieces",
    "config_to_preselection",
    "config_to_profile",
    "config_to_settings",
    "load_config",
    "load_config_from_dict",
]
