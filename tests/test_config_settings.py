import os
from decimal import Decimal

import pytest

import config
from errors import ConfigurationError


def test_test_environment_loaded_by_default():
    assert config.settings.env == "test"
    assert config.LOGGING.level.upper() == "DEBUG"


def test_reload_settings_switch_environment(monkeypatch):
    monkeypatch.setenv("BATCH_ENV", "production")
    new_settings = config.reload_settings(env="production")
    assert new_settings.env == "production"
    assert config.LOGGING.level.upper() == "WARNING"

    # restore test environment for subsequent tests
    monkeypatch.setenv("BATCH_ENV", "test")
    config.reload_settings(env="test")


def test_transfer_defaults():
    transfer = config.settings.transfer
    assert transfer.max_amount_decimal == Decimal("5000")
    assert transfer.micro_scale == 1_000_000
    assert transfer.native_denoms == {"LUNC": "uluna", "USTC": "uusd"}
    assert transfer.cw20_prefix == "terra1"


def test_legacy_exports_only_carry_logging():
    assert config.LOGGING is config.settings.logging
    for name in ("MAX_AMOUNT", "MICRO_SCALE", "NATIVE_DENOMS", "CW20_PREFIX"):
        assert not hasattr(config, name)


def test_fee_and_chain_defaults():
    settings = config.load_settings(env="test")
    assert settings.fees.gas_prices == {"uluna": "28.4"}
    assert settings.fees.gas_adjustment == pytest.approx(1.4)
    assert settings.chain.chain_id == "columbus-5"
    assert settings.wallet.min_mnemonic_words == 24


def test_log_paths_are_distinct(tmp_path):
    settings = config.load_settings(env="test", overrides={"output": {"directory": str(tmp_path)}})
    assert settings.output.path_for(dry_run=True) == os.path.join(str(tmp_path), "dryrun_results.xlsx")
    assert settings.output.path_for(dry_run=False) == os.path.join(str(tmp_path), "tx_results.xlsx")


def test_env_overrides_replace_denomination_table(monkeypatch):
    monkeypatch.setenv("BATCH_NATIVE_DENOMS", '{"lunc": "uluna"}')
    monkeypatch.setenv("BATCH_MAX_AMOUNT", "250.5")
    settings = config.load_settings(env="test")
    assert settings.transfer.native_denoms == {"LUNC": "uluna"}
    assert settings.transfer.max_amount_decimal == Decimal("250.5")


def test_explicit_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv("BATCH_CW20_PREFIX", "terra2")
    settings = config.load_settings(env="test", overrides={"transfer": {"cw20_prefix": "terra1"}})
    assert settings.transfer.cw20_prefix == "terra1"


@pytest.mark.parametrize(
    "overrides",
    [
        {"transfer": {"max_amount": "-1"}},
        {"transfer": {"max_amount": "lots"}},
        {"transfer": {"native_denoms": {}}},
        {"transfer": {"micro_scale": 0}},
        {"fees": {"gas_adjustment": 0}},
        {"output": {"dryrun_log": "same.xlsx", "live_log": "same.xlsx"}},
        {"chain": {"lcd_url": ""}},
    ],
)
def test_invalid_settings_rejected(overrides):
    with pytest.raises(ConfigurationError):
        config.load_settings(env="test", overrides=overrides)


def test_unknown_key_is_configuration_error():
    with pytest.raises(ConfigurationError):
        config.load_settings(env="test", overrides={"chain": {"endpoint": "x"}})
