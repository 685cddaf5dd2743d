"""Tests for Settings: environment, .env loading and validation."""

import pytest

from api.config import Settings, parse_listen_address

ENV_NAMES = ["LISTEN_ADDRESS", "DB_DSN", "KAFKA_HOST", "KAFKA_TOPIC", "JWT_KEY", "LOG_FILE"]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv first so teardown also undoes whatever load_dotenv writes
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return str(tmp_path / ".env")


class TestParseListenAddress:
    def test_empty_host_means_all_interfaces(self):
        assert parse_listen_address(":8080") == ("0.0.0.0", 8080)

    def test_host_and_port(self):
        assert parse_listen_address("127.0.0.1:9000") == ("127.0.0.1", 9000)

    @pytest.mark.parametrize("address", ["8080", "localhost:", "localhost:http"])
    def test_invalid(self, address):
        with pytest.raises(ValueError):
            parse_listen_address(address)


class TestSettings:
    def test_defaults(self, clean_env):
        s = Settings(env_file=clean_env)
        assert s.LISTEN_ADDRESS == ":8080"
        assert (s.HOST, s.PORT) == ("0.0.0.0", 8080)
        assert s.DB_DSN == ""

    def test_reads_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("LISTEN_ADDRESS", "127.0.0.1:9001")
        monkeypatch.setenv("DB_DSN", "/tmp/companies.db")
        monkeypatch.setenv("KAFKA_HOST", "k1:9092,k2:9092")
        monkeypatch.setenv("KAFKA_TOPIC", "companies")
        monkeypatch.setenv("JWT_KEY", "dGVzdAo=")
        s = Settings(env_file=clean_env)
        assert s.PORT == 9001
        assert s.KAFKA_HOST == "k1:9092,k2:9092"
        s.validate()

    def test_reads_env_file(self, clean_env):
        with open(clean_env, "w") as f:
            f.write("DB_DSN=/data/from-file.db\nKAFKA_TOPIC=events\n")
        s = Settings(env_file=clean_env)
        assert s.DB_DSN == "/data/from-file.db"
        assert s.KAFKA_TOPIC == "events"

    def test_validate_names_missing(self, clean_env, monkeypatch):
        monkeypatch.setenv("DB_DSN", "/tmp/companies.db")
        s = Settings(env_file=clean_env)
        with pytest.raises(ValueError) as exc_info:
            s.validate()
        message = str(exc_info.value)
        assert "KAFKA_HOST" in message
        assert "KAFKA_TOPIC" in message
        assert "JWT_KEY" in message
        assert "DB_DSN" not in message
