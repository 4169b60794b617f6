from .loader import ConfigError, load_config, validate_config
from .models import DiscoveryConfig, EngineConfig, EngineSection, FilterConfig, LoggingConfig, RunnerConfig

__all__ = [
    "ConfigError",
    "DiscoveryConfig",
    "EngineConfig",
    "EngineSection",
    "FilterConfig",
    "LoggingConfig",
    "RunnerConfig",
    "load_config",
    "validate_config",
]
