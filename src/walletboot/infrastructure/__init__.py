from .config import AppConfig, OverrideRecord
from .logging import configure_logging

__all__ = ["AppConfig", "OverrideRecord", "configure_logging"]
