"""Engine configuration."""

from chartmodel.config.schema import (
    DEFAULT_ENGINE_CONFIG,
    EngineConfig,
    engine_config_from_mapping,
    load_engine_config,
)

__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "engine_config_from_mapping",
    "load_engine_config",
]
