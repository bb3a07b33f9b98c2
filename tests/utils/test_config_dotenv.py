import importlib
import os
import sys
import types
from pathlib import Path

import pytest


def _reload_config():
    sys.modules.pop("intelcrawl.config", None)
    return importlib.import_module("intelcrawl.config")


def test_no_dotenv_file_falls_back_to_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setitem(sys.modules, "dotenv", types.SimpleNamespace(load_dotenv=lambda: False))
    monkeypatch.setenv("USER_AGENT", "X-Agent")
    cfg = _reload_config()
    assert cfg.USER_AGENT == "X-Agent"
    assert cfg.get_str_env("USER_AGENT", "intelcrawl/1.0") == "X-Agent"


def test_dotenv_present_but_fails_to_load(monkeypatch, tmp_path):
    tmp_path.joinpath(".env").write_text("USER_AGENT=FromFile")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setitem(sys.modules, "dotenv", types.SimpleNamespace(load_dotenv=lambda: False))
    with pytest.raises(RuntimeError):
        _reload_config()


def test_dotenv_loads_sets_variables(monkeypatch, tmp_path):
    tmp_path.joinpath(".env").write_text("USER_AGENT=DotenvAgent\nCONTEXT_CHARS=80")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("USER_AGENT", raising=False)
    monkeypatch.delenv("CONTEXT_CHARS", raising=False)

    def fake_load():
        # emulate dotenv behavior: read .env and set os.environ
        for line in Path(".env").read_text().splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                monkeypatch.setenv(k, v)
        return True

    monkeypatch.setitem(sys.modules, "dotenv", types.SimpleNamespace(load_dotenv=fake_load))
    cfg = _reload_config()
    assert cfg.USER_AGENT == "DotenvAgent"
    assert cfg.CONTEXT_CHARS == 80


def test_env_helpers(monkeypatch):
    from intelcrawl import config

    monkeypatch.setenv("IC_INT", "7")
    monkeypatch.setenv("IC_BAD_INT", "seven")
    monkeypatch.setenv("IC_FLOAT", "2.5")
    monkeypatch.setenv("IC_BOOL", "Yes")
    monkeypatch.setenv("IC_BAD_BOOL", "maybe")
    monkeypatch.setenv("IC_EMPTY", "")

    assert config.get_int_env("IC_INT", 1) == 7
    assert config.get_int_env("IC_BAD_INT", 1) == 1
    assert config.get_optional_int_env("IC_MISSING") is None
    assert config.get_float_env("IC_FLOAT", 0.0) == 2.5
    assert config.get_bool_env("IC_BOOL", False) is True
    assert config.get_bool_env("IC_BAD_BOOL", False) is False
    assert config.get_str_env("IC_EMPTY", "fallback") == "fallback"
    assert config.get_optional_str_env("IC_EMPTY") is None


def test_log_level_and_config_dir(monkeypatch, tmp_path):
    from intelcrawl import config

    monkeypatch.setenv("INTELCRAWL_LOG_LEVEL", " debug ")
    monkeypatch.setenv("INTELCRAWL_CONFIG_DIR", str(tmp_path))
    assert config.log_level() == "DEBUG"
    assert config.seed_config_dir() == str(tmp_path)
    assert os.path.isdir(config.seed_config_dir())
