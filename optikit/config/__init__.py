"""Configuration for optikit."""

from .settings import OptikitConfig, get_config_path, load_config, save_config

__all__ = ["OptikitConfig", "get_config_path", "load_config", "save_config"]
