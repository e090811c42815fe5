"""Config loading: defaults, profile overlay, accessors."""

from pokvault.config import Settings, get_settings, load_config
from pokvault.config.settings import DEFAULT_BSC_RPC_URL


def test_missing_config_dir_gives_defaults(tmp_path):
    assert load_config(config_dir=tmp_path) == {}
    settings = get_settings(config_dir=tmp_path)
    assert settings.subgraph_page_size == 100
    assert settings.rpc_url == DEFAULT_BSC_RPC_URL
    assert settings.uses_default_rpc


def test_profile_overlay(tmp_path):
    (tmp_path / "default.toml").write_text(
        '[middleware]\nbase_url = "https://a.example/api/"\n[chain]\nrpc_url = ""\n[logging]\nlevel = "info"\n'
    )
    (tmp_path / "dev.toml").write_text('[chain]\nrpc_url = "https://rpc.example"\n[logging]\nlevel = "debug"\n')

    base = get_settings(config_dir=tmp_path)
    assert base.middleware_base_url == "https://a.example/api"
    assert base.uses_default_rpc

    dev = get_settings("dev", config_dir=tmp_path)
    assert dev.rpc_url == "https://rpc.example"
    assert not dev.uses_default_rpc
    assert dev.logging_level == "DEBUG"
    assert dev.middleware_base_url == "https://a.example/api"


def test_settings_from_dict():
    s = Settings.from_dict({"subgraph": {"page_size": "25"}, "providers": {"opinion_address": "0xabc"}})
    assert s.subgraph_page_size == 25
    assert s.opinion_address == "0xabc"
    assert s.logging_format == "console"


def test_market_info_resolver_defaults_to_batch(tmp_path):
    assert get_settings(config_dir=tmp_path).market_info_resolver == "batch"
    assert Settings.from_dict({"middleware": {"resolver": "providers"}}).market_info_resolver == "providers"
