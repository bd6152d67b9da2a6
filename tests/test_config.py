import pytest

from stashtrade.tradeapi.config import Config, ConfigError


def test_reads_both_settings():
    config = Config.from_env(
        {"METRICS_PORT": "9100", "TRADE_API_DATABASE_URL": "postgres://localhost/trade"}
    )
    assert config.metrics_port == 9100
    assert config.db_url == "postgres://localhost/trade"


def test_accepts_leading_plus():
    config = Config.from_env({"METRICS_PORT": "+9100", "TRADE_API_DATABASE_URL": "db"})
    assert config.metrics_port == 9100


def test_missing_port_names_the_variable():
    with pytest.raises(ConfigError, match="METRICS_PORT"):
        Config.from_env({"TRADE_API_DATABASE_URL": "db"})


def test_missing_database_url_names_the_variable():
    with pytest.raises(ConfigError, match="TRADE_API_DATABASE_URL"):
        Config.from_env({"METRICS_PORT": "9100"})


@pytest.mark.parametrize("port", ["abc", "-1", "", "4294967296", "12.5"])
def test_rejects_invalid_port(port):
    with pytest.raises(ConfigError):
        Config.from_env({"METRICS_PORT": port, "TRADE_API_DATABASE_URL": "db"})


def test_largest_u32_port_is_accepted():
    config = Config.from_env(
        {"METRICS_PORT": "4294967295", "TRADE_API_DATABASE_URL": "db"}
    )
    assert config.metrics_port == 4294967295


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("METRICS_PORT", "8000")
    monkeypatch.setenv("TRADE_API_DATABASE_URL", "postgres://localhost/other")
    config = Config.from_env()
    assert config == Config(metrics_port=8000, db_url="postgres://localhost/other")