"""Environment-aware configuration for the batch sender."""
from __future__ import annotations

import copy
import json
import os
from dataclasses import asdict, dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from errors import ConfigurationError


@dataclass
class ChainSettings:
    lcd_url: str = "https://lcd.terra-classic.hexxagon.io/"
    chain_id: str = "columbus-5"

    def validate(self) -> None:
        if not self.lcd_url:
            raise ConfigurationError("LCD URL must be provided.")
        if not self.chain_id:
            raise ConfigurationError("Chain ID must be provided.")


@dataclass
class TransferSettings:
    # Kept as a string so overrides never pass through a binary float.
    max_amount: str = "5000"
    micro_scale: int = 1_000_000
    native_denoms: Dict[str, str] = field(default_factory=lambda: {"LUNC": "uluna", "USTC": "uusd"})
    cw20_prefix: str = "terra1"

    @property
    def max_amount_decimal(self) -> Decimal:
        return Decimal(str(self.max_amount))

    def validate(self) -> None:
        try:
            ceiling = Decimal(str(self.max_amount))
        except InvalidOperation as exc:
            raise ConfigurationError(f"Invalid max amount: {self.max_amount!r}") from exc
        if not ceiling.is_finite() or ceiling <= 0:
            raise ConfigurationError(f"Max amount must be a positive number (got {self.max_amount}).")
        if not isinstance(self.micro_scale, int) or self.micro_scale <= 0:
            raise ConfigurationError(f"Micro scale must be a positive integer (got {self.micro_scale}).")
        if not isinstance(self.native_denoms, dict) or not self.native_denoms:
            raise ConfigurationError("Native denomination table must be a non-empty mapping.")
        for symbol, denom in self.native_denoms.items():
            if not (isinstance(symbol, str) and symbol.strip()):
                raise ConfigurationError(f"Invalid native token symbol: {symbol!r}")
            if not (isinstance(denom, str) and denom.strip()):
                raise ConfigurationError(f"Invalid denomination for {symbol}: {denom!r}")
        if not self.cw20_prefix:
            raise ConfigurationError("CW20 contract prefix must be provided.")


@dataclass
class FeeSettings:
    gas_prices: Dict[str, str] = field(default_factory=lambda: {"uluna": "28.4"})
    gas_adjustment: float = 1.4

    def validate(self) -> None:
        if not isinstance(self.gas_prices, dict) or not self.gas_prices:
            raise ConfigurationError("At least one gas price must be configured.")
        for denom, price in self.gas_prices.items():
            try:
                value = Decimal(str(price))
            except InvalidOperation as exc:
                raise ConfigurationError(f"Invalid gas price for {denom}: {price!r}") from exc
            if value < 0:
                raise ConfigurationError(f"Gas price for {denom} must not be negative.")
        if self.gas_adjustment <= 0:
            raise ConfigurationError(f"Gas adjustment must be positive (got {self.gas_adjustment}).")


@dataclass
class OutputSettings:
    directory: str = "."
    dryrun_log: str = "dryrun_results.xlsx"
    live_log: str = "tx_results.xlsx"

    def validate(self) -> None:
        if not self.dryrun_log or not self.live_log:
            raise ConfigurationError("Both dry-run and live log file names must be configured.")
        if self.dryrun_log == self.live_log:
            raise ConfigurationError("Dry-run and live log file names must differ.")

    def path_for(self, dry_run: bool) -> str:
        name = self.dryrun_log if dry_run else self.live_log
        return os.path.join(self.directory or ".", name)


@dataclass
class WalletSettings:
    min_mnemonic_words: int = 24

    def validate(self) -> None:
        if self.min_mnemonic_words <= 0:
            raise ConfigurationError("Minimum mnemonic word count must be positive.")


@dataclass
class LoggingSettings:
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    def validate(self) -> None:
        if not self.level:
            raise ConfigurationError("Logging level must be provided.")
        if not self.format:
            raise ConfigurationError("Logging format must be provided.")


@dataclass
class Settings:
    env: str
    chain: ChainSettings
    transfer: TransferSettings
    fees: FeeSettings
    output: OutputSettings
    wallet: WalletSettings
    logging: LoggingSettings

    def validate(self) -> None:
        self.chain.validate()
        self.transfer.validate()
        self.fees.validate()
        self.output.validate()
        self.wallet.validate()
        self.logging.validate()


BASE_DEFAULTS: Dict[str, Any] = {
    "chain": asdict(ChainSettings()),
    "transfer": asdict(TransferSettings()),
    "fees": asdict(FeeSettings()),
    "output": asdict(OutputSettings()),
    "wallet": asdict(WalletSettings()),
    "logging": asdict(LoggingSettings()),
}

ENVIRONMENT_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "development": {},
    "test": {
        "logging": {"level": "DEBUG"},
    },
    "production": {
        "logging": {"level": "WARNING"},
    },
}


def _json_mapping(value: str) -> Dict[str, Any]:
    parsed = json.loads(value)
    if not isinstance(parsed, dict):
        raise ValueError("expected a JSON object")
    return parsed


_ENV_VALUE_CASTERS: Dict[str, Any] = {
    "BATCH_LCD_URL": ("chain", "lcd_url", str),
    "BATCH_CHAIN_ID": ("chain", "chain_id", str),
    "BATCH_MAX_AMOUNT": ("transfer", "max_amount", str),
    "BATCH_MICRO_SCALE": ("transfer", "micro_scale", int),
    "BATCH_NATIVE_DENOMS": ("transfer", "native_denoms", _json_mapping),
    "BATCH_CW20_PREFIX": ("transfer", "cw20_prefix", str),
    "BATCH_GAS_PRICES": ("fees", "gas_prices", _json_mapping),
    "BATCH_GAS_ADJUSTMENT": ("fees", "gas_adjustment", float),
    "BATCH_OUTPUT_DIR": ("output", "directory", str),
    "BATCH_DRYRUN_LOG": ("output", "dryrun_log", str),
    "BATCH_LIVE_LOG": ("output", "live_log", str),
    "BATCH_MIN_MNEMONIC_WORDS": ("wallet", "min_mnemonic_words", int),
    "BATCH_LOG_LEVEL": ("logging", "level", str),
    "BATCH_LOG_FORMAT": ("logging", "format", str),
    "BATCH_LOG_DATEFMT": ("logging", "datefmt", str),
}


# Lookup tables are swapped wholesale so an override can also remove entries.
_REPLACED_TABLES = frozenset({"native_denoms", "gas_prices"})


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict) and key not in _REPLACED_TABLES:
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _overrides_from_env() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for env_key, (section, key, caster) in _ENV_VALUE_CASTERS.items():
        raw = os.environ.get(env_key)
        if raw is None:
            continue
        try:
            parsed = caster(raw)
        except Exception as exc:  # pragma: no cover - configuration error path
            raise ConfigurationError(f"Failed to coerce environment variable {env_key}: {exc}") from exc
        overrides.setdefault(section, {})[key] = parsed
    return overrides


def _normalize_denoms(table: Dict[str, Any]) -> Dict[str, str]:
    return {str(symbol).strip().upper(): str(denom).strip() for symbol, denom in table.items()}


def _settings_from_dict(env: str, payload: Dict[str, Any]) -> Settings:
    transfer = dict(payload["transfer"])
    if isinstance(transfer.get("native_denoms"), dict):
        transfer["native_denoms"] = _normalize_denoms(transfer["native_denoms"])
    try:
        return Settings(
            env=env,
            chain=ChainSettings(**payload["chain"]),
            transfer=TransferSettings(**transfer),
            fees=FeeSettings(**payload["fees"]),
            output=OutputSettings(**payload["output"]),
            wallet=WalletSettings(**payload["wallet"]),
            logging=LoggingSettings(**payload["logging"]),
        )
    except TypeError as exc:
        raise ConfigurationError(f"Unknown configuration key: {exc}") from exc


def load_settings(env: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Settings:
    env_name = (env or os.environ.get("BATCH_ENV", "development")).lower()
    base = copy.deepcopy(BASE_DEFAULTS)
    env_specific = ENVIRONMENT_OVERRIDES.get(env_name, {})
    base = _deep_merge(base, copy.deepcopy(env_specific))
    base = _deep_merge(base, _overrides_from_env())
    if overrides:
        base = _deep_merge(base, copy.deepcopy(overrides))
    settings_obj = _settings_from_dict(env_name, base)
    settings_obj.validate()
    return settings_obj


def _sync_legacy_exports(current: Settings) -> None:
    global LOGGING

    LOGGING = current.logging


def reload_settings(env: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Settings:
    global settings
    settings = load_settings(env=env or settings.env, overrides=overrides)
    _sync_legacy_exports(settings)
    return settings


settings: Settings = load_settings()
_sync_legacy_exports(settings)

__all__ = [
    "settings",
    "load_settings",
    "reload_settings",
    "Settings",
    "ChainSettings",
    "TransferSettings",
    "FeeSettings",
    "OutputSettings",
    "WalletSettings",
    "LoggingSettings",
    "LOGGING",
]
