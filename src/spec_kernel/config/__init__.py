from .loader import ConfigError, load_engine_config, load_yaml_config, parse_engine_config
from .models import EngineConfig, LoggingConfig, ReportConfig

__all__ = [
    "ConfigError",
    "EngineConfig",
    "LoggingConfig",
    "ReportConfig",
    "load_engine_config",
    "load_yaml_config",
    "parse_engine_config",
]
