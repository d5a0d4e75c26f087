import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import toml
from dotenv import load_dotenv
from loguru import logger

from ...domain.chains import DEFAULT_ENDPOINTS, FALLBACK_URL, ChainId, EndpointTable, is_usable_url
from ...domain.errors import ConfigError
from ...domain.session import AppMetadata

# Public demo project id; replace through WALLETCONNECT_PROJECT_ID for real deployments.
DEFAULT_PROJECT_ID = "dce4c19a5efd3cba4116b12d4fc3689a"
PROJECT_ID_ENV_VARS = ("WALLETCONNECT_PROJECT_ID", "NEXT_PUBLIC_WALLETCONNECT_PROJECT_ID")
DEFAULT_APP_NAME = "RainbowKit App"


@dataclass(frozen=True)
class OverrideRecord:
    key: str
    source: str
    old: Any
    new: Any


@dataclass(frozen=True)
class AppConfig:
    endpoints: EndpointTable
    credential: str
    credential_is_fallback: bool = False
    app_name: str = DEFAULT_APP_NAME
    metadata: AppMetadata = field(default_factory=AppMetadata)
    transport_timeout_seconds: float = 10.0
    step_timeout_seconds: Optional[float] = None
    overrides: Tuple[OverrideRecord, ...] = ()
    loaded_files: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.credential:
            raise ConfigError("credential must never be empty after loading")

    @classmethod
    def load(
        cls,
        settings_path: Optional[str] = None,
        env_prefix: str = "WALLETBOOT__",
        use_dotenv: bool = True,
        dotenv_path: Optional[str] = None,
    ) -> "AppConfig":
        """Layer defaults, an optional TOML file and env overrides into one frozen config.

        The credential is read here and nowhere else.
        """
        if use_dotenv:
            load_dotenv(dotenv_path)

        layers: List[Tuple[Dict[str, Any], str]] = [(_defaults(), "defaults")]
        loaded_files: List[str] = []

        if settings_path:
            if os.path.exists(settings_path):
                with open(settings_path, "r", encoding="utf-8") as f:
                    try:
                        data = toml.load(f)
                    except toml.TomlDecodeError as exc:
                        raise ConfigError(f"{settings_path}: {exc}") from exc
                label = os.path.basename(settings_path) or "settings.toml"
                layers.append((data, label))
                loaded_files.append(label)
            else:
                logger.warning(f"Settings file not found, using defaults | path={settings_path}")

        env_overrides = _load_env_overrides(env_prefix)
        if env_overrides:
            layers.append((env_overrides, "env"))

        merged: Dict[str, Any] = {}
        overrides: List[OverrideRecord] = []
        for payload, source in layers:
            _merge_dicts(merged, payload, source, overrides)
        # defaults are the base layer, not overrides
        overrides = [o for o in overrides if o.source != "defaults"]

        credential, is_fallback = _load_credential()
        transport = _section(merged, "transport")
        session = _section(merged, "session")

        cfg = cls(
            endpoints=_build_endpoints(merged),
            credential=credential,
            credential_is_fallback=is_fallback,
            app_name=str(merged.get("app_name", DEFAULT_APP_NAME)),
            metadata=_build_metadata(merged),
            transport_timeout_seconds=_to_float(transport.get("timeout_seconds", 10.0), "transport.timeout_seconds"),
            step_timeout_seconds=_optional_timeout(session.get("step_timeout_seconds")),
            overrides=tuple(overrides),
            loaded_files=tuple(loaded_files),
        )
        cfg.log_summary()
        return cfg

    def log_summary(self) -> None:
        logger.info(f"Loaded config files: {', '.join(self.loaded_files) or '<none>'}")
        for o in self.overrides:
            logger.info(f"Override: {o.key} from {o.source} (old={o.old} -> new={o.new})")
        logger.info(
            f"Endpoints: chains={sorted(self.endpoints.chain_ids())} fallback={_redact(self.endpoints.fallback_url)}"
        )
        if self.credential_is_fallback:
            logger.warning("Project credential not set in environment; using the built-in demo project id")
        else:
            logger.info("Project credential loaded from environment")
        logger.info(f"App: name={self.app_name!r} metadata_url={self.metadata.url}")
        if self.step_timeout_seconds is None:
            logger.info("Session step timeout: none")
        else:
            logger.info(f"Session step timeout: {self.step_timeout_seconds}s")


def _defaults() -> Dict[str, Any]:
    meta = AppMetadata()
    return {
        "app_name": DEFAULT_APP_NAME,
        "endpoints": {str(k): v for k, v in DEFAULT_ENDPOINTS.items()},
        "transport": {"fallback_url": FALLBACK_URL, "timeout_seconds": 10.0},
        "metadata": {
            "name": meta.name,
            "description": meta.description,
            "url": meta.url,
            "icons": list(meta.icons),
        },
        "session": {},
    }


def _load_credential() -> Tuple[str, bool]:
    for name in PROJECT_ID_ENV_VARS:
        value = os.getenv(name, "").strip()
        if value:
            return value, False
    return DEFAULT_PROJECT_ID, True


def _redact(url: str) -> str:
    # Alchemy-style URLs carry the API key as the last path segment.
    if "/v2/" in url:
        return url.split("/v2/", 1)[0] + "/v2/***"
    return url


def _merge_dicts(
    dst: Dict[str, Any], src: Mapping[str, Any], source: str, overrides: List[OverrideRecord], prefix: str = ""
) -> None:
    for key, value in src.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict) and isinstance(dst.get(key), dict):
            _merge_dicts(dst[key], value, source, overrides, full_key)
        elif isinstance(value, dict):
            dst[key] = value.copy()
        else:
            if key in dst and dst[key] != value:
                overrides.append(OverrideRecord(full_key, source, dst[key], value))
            dst[key] = value


def _load_env_overrides(prefix: str) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for env_key, env_val in os.environ.items():
        if not env_key.startswith(prefix):
            continue
        path_parts = env_key[len(prefix):].lower().split("__")
        _assign_env_override(overrides, path_parts, env_val)
    return overrides


def _assign_env_override(dst: Dict[str, Any], path_parts: List[str], raw_val: str) -> None:
    cur = dst
    for part in path_parts[:-1]:
        if part not in cur or not isinstance(cur[part], dict):
            cur[part] = {}
        cur = cur[part]
    leaf = path_parts[-1]
    if leaf == "icons":
        cur[leaf] = [s.strip() for s in raw_val.split(",") if s.strip()]
        return
    # URLs and chain-keyed entries stay strings
    if path_parts[0] in ("endpoints", "metadata") or leaf == "fallback_url":
        cur[leaf] = raw_val
        return
    cur[leaf] = _coerce_env_value(raw_val)


def _coerce_env_value(val: str) -> Any:
    lowered = val.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    try:
        return int(val)
    except ValueError:
        pass
    try:
        return float(val)
    except ValueError:
        pass
    return val


def _build_endpoints(cfg: Dict[str, Any]) -> EndpointTable:
    section = _section(cfg, "endpoints")
    endpoints: Dict[ChainId, str] = {}
    for raw_id, url in section.items():
        try:
            chain_id = int(raw_id)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"endpoints.{raw_id}: chain id must be an integer") from exc
        if not isinstance(url, str):
            raise ConfigError(f"endpoints.{raw_id}: URL must be a string, got {type(url).__name__}")
        if not is_usable_url(url):
            logger.warning(f"endpoints.{raw_id} is not a usable URL; chain {chain_id} will use the fallback")
        endpoints[chain_id] = url

    fallback = _section(cfg, "transport").get("fallback_url", FALLBACK_URL)
    try:
        return EndpointTable(endpoints=endpoints, fallback_url=fallback)
    except ValueError as exc:
        raise ConfigError(f"transport.fallback_url: {exc}") from exc


def _build_metadata(cfg: Dict[str, Any]) -> AppMetadata:
    section = _section(cfg, "metadata")
    icons = section.get("icons", [])
    if isinstance(icons, str):
        icons = [icons]
    if not isinstance(icons, (list, tuple)):
        raise ConfigError(f"metadata.icons must be a list of URLs, got {type(icons).__name__}")
    return AppMetadata(
        name=str(section.get("name", "")),
        description=str(section.get("description", "")),
        url=str(section.get("url", "")),
        icons=tuple(str(i) for i in icons),
    )


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = cfg.get(name, {}) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, got {type(section).__name__}")
    return section


def _to_float(val: Any, field_name: str) -> float:
    try:
        return float(val)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid float for {field_name}: {val}") from exc


def _optional_timeout(val: Any) -> Optional[float]:
    if val is None or val == "" or val == 0:
        return None
    timeout = _to_float(val, "session.step_timeout_seconds")
    if timeout <= 0:
        raise ConfigError(f"session.step_timeout_seconds must be positive, got {timeout}")
    return timeout
