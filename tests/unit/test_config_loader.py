"""
Module: tests/unit/test_config_loader.py

What:
    Validate configuration discovery, YAML parsing and schema validation.

Why:
    The CLI and scripts depend on one loader; a silently accepted typo (an
    unknown key, a zero timeout) would surface much later as a connection
    problem.

How:
    Write YAML documents into ``tmp_path`` and resolve them explicitly, through
    ``MAILWIRE_CONFIG_PATH`` and through the working-directory default.

Invariants & Safety Rules:
    - Every failure surfaces as :class:`ConfigLoadError` naming the source.
"""

import pytest

from mailwire.config import ClientConfig, ConfigLoadError, load_config, parse_config
from mailwire.config.loader import CONFIG_ENV

VALID = """
version: 1
imap:
  host: " imap.example.org "
  port: 143
  secure: false
  timeout: 15
account:
  username: alice
  password: s3cret
"""


def test_parse_config_applies_defaults_and_strips_host():
    config = parse_config("imap:\n  host: mail.example.org\n")
    assert config.imap == ClientConfig(host="mail.example.org")
    assert config.imap.port == 993
    assert config.imap.secure is True
    assert config.imap.debug is False
    assert config.imap.timeout is None
    assert config.imap.verify_certificate is True
    assert config.imap.disconnect_on_desync is False
    assert config.account is None


def test_parse_config_full_document():
    config = parse_config(VALID)
    assert config.imap.host == "imap.example.org"
    assert config.imap.port == 143
    assert config.imap.timeout == 15.0
    assert config.account.username == "alice"


@pytest.mark.parametrize(
    "document",
    [
        "imap:\n  host: x\n  colour: blue\n",
        "imap:\n  host: '   '\n",
        "imap:\n  host: x\n  port: 0\n",
        "imap:\n  host: x\n  timeout: 0\n",
        "version: 2\nimap:\n  host: x\n",
        "account:\n  username: a\n  password: b\n",
    ],
)
def test_invalid_documents_raise(document):
    with pytest.raises(ConfigLoadError, match="Invalid configuration in <string>"):
        parse_config(document)


def test_yaml_syntax_error_is_wrapped():
    with pytest.raises(ConfigLoadError, match="Invalid YAML"):
        parse_config("imap: [unclosed")


def test_top_level_must_be_mapping():
    with pytest.raises(ConfigLoadError, match="mapping"):
        parse_config("- just\n- a list\n")


def test_load_config_explicit_path(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text(VALID, encoding="utf-8")
    assert load_config(path).imap.port == 143
    assert load_config(str(path)).imap.port == 143


def test_load_config_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("imap:\n  host: env.example.org\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV, str(path))
    assert load_config().imap.host == "env.example.org"


def test_explicit_path_wins_over_environment(tmp_path, monkeypatch):
    env_path = tmp_path / "env.yaml"
    env_path.write_text("imap:\n  host: env.example.org\n", encoding="utf-8")
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("imap:\n  host: explicit.example.org\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV, str(env_path))
    assert load_config(explicit).imap.host == "explicit.example.org"


def test_load_config_from_working_directory(tmp_path):
    (tmp_path / "mailwire.yaml").write_text("imap:\n  host: cwd.example.org\n", encoding="utf-8")
    assert load_config().imap.host == "cwd.example.org"


def test_missing_config_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    with pytest.raises(ConfigLoadError, match="Unable to locate configuration"):
        load_config(tmp_path / "absent.yaml")


def test_invalid_file_names_its_path(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("imap:\n  port: 143\n", encoding="utf-8")
    with pytest.raises(ConfigLoadError, match="broken.yaml"):
        load_config(path)
