"""TOML config loading and profiles."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"

DEFAULT_SUBGRAPH_URL = (
    "https://api.goldsky.com/api/public/project_cmk8kaeveu7zx01u72pajfmi5/subgraphs/pokVault-BSC/1.0.0/gn"
)
DEFAULT_MIDDLEWARE_BASE_URL = "https://api.pokvault.xyz/api"
DEFAULT_BSC_RPC_URL = "https://bsc-dataseed.binance.org/"
DEFAULT_VAULT_ADDRESS = "0x5a791CCAB49931861056365eBC072653F3FA0ba0"

RESOLVER_BATCH = "batch"
RESOLVER_PROVIDERS = "providers"
MARKET_INFO_RESOLVERS = (RESOLVER_BATCH, RESOLVER_PROVIDERS)

POLYMARKET_BSC_ADDRESS = "0x77b0052a346b22ea1f3112e3fcef079567ed9979"
POLYMARKET_BSC_LEGACY_ADDRESS = "0xB42D95Bd05713eD14369fC1a1e4fAF107b27c464"
OPINION_ADDRESS = "0xAD1a38cEc043e70E83a3eC30443dB285ED10D774"
PROBABLE_ADDRESS = "0x364d05055614B506e2b9A287E4ac34167204cA83"


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir() -> Path:
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    config_dir = config_dir or _find_config_dir()
    default_path = config_dir / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = config_dir / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    """Return Settings instance from merged config."""
    raw = load_config(profile, config_dir)
    return Settings.from_dict(raw)


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        subgraph: dict[str, Any] | None = None,
        middleware: dict[str, Any] | None = None,
        chain: dict[str, Any] | None = None,
        providers: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.subgraph = subgraph or {}
        self.middleware = middleware or {}
        self.chain = chain or {}
        self.providers = providers or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            subgraph=raw.get("subgraph"),
            middleware=raw.get("middleware"),
            chain=raw.get("chain"),
            providers=raw.get("providers"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def subgraph_url(self) -> str:
        return self.subgraph.get("url", DEFAULT_SUBGRAPH_URL)

    @property
    def subgraph_page_size(self) -> int:
        return int(self.subgraph.get("page_size", 100))

    @property
    def subgraph_timeout_sec(self) -> float:
        return float(self.subgraph.get("timeout_sec", 30.0))

    @property
    def middleware_base_url(self) -> str:
        return self.middleware.get("base_url", DEFAULT_MIDDLEWARE_BASE_URL).rstrip("/")

    @property
    def middleware_timeout_sec(self) -> float:
        return float(self.middleware.get("timeout_sec", 30.0))

    @property
    def market_info_resolver(self) -> str:
        """"batch" (one middleware POST) or "providers" (per-token provider lookups)."""
        return self.middleware.get("resolver", RESOLVER_BATCH)

    @property
    def opinion_api_key(self) -> str:
        return self.middleware.get("opinion_api_key", "")

    @property
    def rpc_url(self) -> str:
        return self.chain.get("rpc_url") or DEFAULT_BSC_RPC_URL

    @property
    def uses_default_rpc(self) -> bool:
        return not self.chain.get("rpc_url")

    @property
    def vault_address(self) -> str:
        return self.chain.get("vault_address", DEFAULT_VAULT_ADDRESS)

    @property
    def polymarket_address(self) -> str:
        return self.providers.get("polymarket_address", POLYMARKET_BSC_ADDRESS)

    @property
    def polymarket_legacy_address(self) -> str:
        return self.providers.get("polymarket_legacy_address", POLYMARKET_BSC_LEGACY_ADDRESS)

    @property
    def opinion_address(self) -> str:
        return self.providers.get("opinion_address", OPINION_ADDRESS)

    @property
    def probable_address(self) -> str:
        return self.providers.get("probable_address", PROBABLE_ADDRESS)

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
