from .settings import Settings, get_settings, initialize_settings, reset_settings

__all__ = ["Settings", "get_settings", "initialize_settings", "reset_settings"]
