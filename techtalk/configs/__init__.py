from techtalk.configs.settings import CONFIG_MAP, LimiterConfig, Settings, settings

__all__ = [
    "CONFIG_MAP",
    "LimiterConfig",
    "Settings",
    "settings",
]
