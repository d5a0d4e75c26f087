from .app_config import DEFAULT_APP_NAME, DEFAULT_PROJECT_ID, AppConfig, OverrideRecord

__all__ = ["AppConfig", "OverrideRecord", "DEFAULT_APP_NAME", "DEFAULT_PROJECT_ID"]
