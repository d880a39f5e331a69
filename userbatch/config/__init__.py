from .loader import ConfigError, VerifyConfig, load_config

__all__ = [
    "ConfigError",
    "VerifyConfig",
    "load_config",
]
