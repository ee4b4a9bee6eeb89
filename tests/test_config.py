"""Tests for configuration and token storage."""

import pytest

from ticktick_cli.config import DEFAULT_REDIRECT_URI, Config, Tokens, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("TICKTICK_CLIENT_ID", raising=False)
    monkeypatch.delenv("TICKTICK_CLIENT_SECRET", raising=False)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "tt.conf") == Config()

    def test_reads_values(self, tmp_path):
        path = tmp_path / "tt.conf"
        path.write_text(
            "# credentials\n"
            "\n"
            'TICKTICK_CLIENT_ID="abc" # from developer portal\n'
            "ticktick_client_secret = 's3cr#t'\n"
            "DEFAULT_LIST=🚀Personal  # inline comment\n"
            "OUTPUT=JSON\n"
            "not a setting\n"
        )
        config = load_config(path)
        assert config.ticktick_client_id == "abc"
        assert config.ticktick_client_secret == "s3cr#t"
        assert config.default_list == "🚀Personal"
        assert config.output == "json"
        assert config.redirect_uri == DEFAULT_REDIRECT_URI

    def test_unknown_output_ignored(self, tmp_path):
        path = tmp_path / "tt.conf"
        path.write_text("OUTPUT=xml\n")
        assert load_config(path).output == "human"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "tt.conf"
        path.write_text("TICKTICK_CLIENT_ID=file\n")
        monkeypatch.setenv("TICKTICK_CLIENT_ID", "env")
        assert load_config(path).ticktick_client_id == "env"


class TestTokens:
    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / ".tokens.json"
        Tokens(access_token="a", refresh_token="r", expires_at=42).save(path)

        assert oct(path.stat().st_mode & 0o777) == "0o600"
        assert Tokens.load(path) == Tokens(access_token="a", refresh_token="r", expires_at=42)

    def test_load_missing(self, tmp_path):
        assert Tokens.load(tmp_path / "missing.json") == Tokens()

    def test_load_corrupt(self, tmp_path):
        path = tmp_path / ".tokens.json"
        path.write_text("{not json")
        assert Tokens.load(path) == Tokens()

    def test_clear(self, tmp_path):
        path = tmp_path / ".tokens.json"
        Tokens(access_token="a").save(path)
        assert Tokens.clear(path) is True
        assert not path.exists()
        assert Tokens.clear(path) is False
