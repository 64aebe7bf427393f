import json
import logging
import pytest
from unittest.mock import patch
from bookfinder.config import Config, DEFAULT_LLM_MODEL, config
from bookfinder.logger import HANDLER_TAG, setup_logging

def test_defaults():
    assert config.OPENROUTER_API_KEY is None
    assert config.LLM_MODEL == DEFAULT_LLM_MODEL
    assert config.LLM_TIMEOUT == 6.0
    assert config.CACHE_TTL_SECONDS == 300.0
    assert config.USE_STATIC_FALLBACK is False
    assert config.pdf_search_enabled is False

def test_env_overrides_file(monkeypatch):
    config.file_config["LLM_MODEL"] = "file/model"
    assert config.LLM_MODEL == "file/model"

    monkeypatch.setenv("LLM_MODEL", "env/model")
    assert config.LLM_MODEL == "env/model"

def test_numeric_and_boolean_values(monkeypatch):
    monkeypatch.setenv("LLM_TIMEOUT", "8")
    monkeypatch.setenv("CACHE_TTL_SECONDS", "60")
    monkeypatch.setenv("USE_STATIC_FALLBACK", "Yes")
    assert config.LLM_TIMEOUT == 8.0
    assert config.CACHE_TTL_SECONDS == 60.0
    assert config.USE_STATIC_FALLBACK is True

    monkeypatch.setenv("USE_STATIC_FALLBACK", "off")
    assert config.USE_STATIC_FALLBACK is False

def test_pdf_search_needs_both_keys(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "key")
    assert config.pdf_search_enabled is False
    monkeypatch.setenv("GOOGLE_CX", "cx")
    assert config.pdf_search_enabled is True

def test_validate_reports_missing_keys():
    warnings = config.validate()
    assert len(warnings) == 2
    assert "OPENROUTER_API_KEY" in warnings[0]

def test_file_config_loaded_and_saved(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"GOOGLE_CX": "from-file"}))

    with patch("bookfinder.config.CONFIG_PATH", path):
        cfg = Config()
        assert cfg.GOOGLE_CX == "from-file"
        cfg.save("LLM_MODEL", "saved/model")

    assert json.loads(path.read_text()) == {"GOOGLE_CX": "from-file", "LLM_MODEL": "saved/model"}

def test_unreadable_config_file_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    with patch("bookfinder.config.CONFIG_PATH", path):
        cfg = Config()

    assert cfg.file_config == {}

@pytest.fixture
def restore_root_logger():
    # api.py sets up logging at import; set its handlers aside for the test
    root = logging.getLogger()
    level = root.level
    attached = ours(root)
    for handler in attached:
        root.removeHandler(handler)
    yield root
    for handler in ours(root):
        handler.close()
        root.removeHandler(handler)
    for handler in attached:
        root.addHandler(handler)
    root.setLevel(level)

def ours(root):
    return [h for h in root.handlers if getattr(h, HANDLER_TAG, None)]

@pytest.fixture
def log_file(tmp_path):
    from bookfinder import logger
    path = tmp_path / "test.log"
    with patch.object(logger, "LOG_DIR", tmp_path), patch.object(logger, "LOG_FILE", path):
        yield path

def test_logger_setup(log_file, restore_root_logger):
    setup_logging()

    logging.getLogger("bookfinder.test").info("Test Log Entry")

    assert log_file.exists()
    assert "Test Log Entry" in log_file.read_text(encoding='utf-8')

def test_root_logger_defaults_to_info(log_file, restore_root_logger):
    setup_logging()

    assert restore_root_logger.level == logging.INFO
    logging.getLogger("bookfinder.test").debug("Hidden Debug Entry")
    assert "Hidden Debug Entry" not in log_file.read_text(encoding='utf-8')

def test_verbose_level_reaches_console_and_file(log_file, restore_root_logger):
    setup_logging(logging.DEBUG)

    assert restore_root_logger.level == logging.DEBUG
    levels = sorted(h.level for h in ours(restore_root_logger))
    assert levels == [logging.DEBUG, logging.DEBUG]
    logging.getLogger("bookfinder.test").debug("Verbose Debug Entry")
    assert "Verbose Debug Entry" in log_file.read_text(encoding='utf-8')

def test_repeated_setup_does_not_duplicate_handlers(log_file, restore_root_logger):
    setup_logging()
    setup_logging()
    setup_logging(logging.DEBUG)

    assert len(ours(restore_root_logger)) == 2
    logging.getLogger("bookfinder.test").info("Single Entry")
    assert log_file.read_text(encoding='utf-8').count("Single Entry") == 1

def test_setup_leaves_foreign_handlers_alone(log_file, restore_root_logger):
    foreign = logging.NullHandler()
    restore_root_logger.addHandler(foreign)

    setup_logging()
    setup_logging()

    assert foreign in restore_root_logger.handlers
    assert len(ours(restore_root_logger)) == 2
    restore_root_logger.removeHandler(foreign)

@pytest.mark.parametrize("value", ["abc", "0", "-5", "inf"])
def test_invalid_numbers_fall_back_to_defaults(monkeypatch, value):
    monkeypatch.setenv("LLM_TIMEOUT", value)
    monkeypatch.setenv("CACHE_TTL_SECONDS", value)
    assert config.LLM_TIMEOUT == 6.0
    assert config.CACHE_TTL_SECONDS == 300.0

@pytest.mark.parametrize("key,value", [
    ("LLM_TIMEOUT", "soon"),
    ("CACHE_TTL_SECONDS", "-1"),
    ("USE_STATIC_FALLBACK", "sometimes"),
])
def test_save_rejects_unusable_values(tmp_path, key, value):
    path = tmp_path / "config.json"
    with patch("bookfinder.config.CONFIG_PATH", path):
        cfg = Config()
        with pytest.raises(ValueError):
            cfg.save(key, value)

    assert key not in cfg.file_config
    assert not path.exists()
