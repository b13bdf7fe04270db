from __future__ import annotations

import importlib
import logging

import pytest


def test_normalize_logging_config_defaults() -> None:
    mod = importlib.import_module("lattice_pricing.cli.logging")
    normalized = mod._normalize_logging_config(None)
    assert normalized == mod.DEFAULT_LOGGING


def test_normalize_logging_config_overrides() -> None:
    mod = importlib.import_module("lattice_pricing.cli.logging")
    cfg = {
        "level": "DEBUG",
        "format": "%(message)s",
        "file": "log.txt",
        "color": False,
        "unknown": "ignored",
    }
    normalized = mod._normalize_logging_config(cfg)
    assert normalized["level"] == "DEBUG"
    assert normalized["format"] == "%(message)s"
    assert normalized["file"] == "log.txt"
    assert normalized["color"] is False
    assert "unknown" not in normalized


def test_setup_logging_from_config_uses_normalized(monkeypatch, tmp_path) -> None:
    mod = importlib.import_module("lattice_pricing.cli.logging")

    captured: dict[str, object] = {}

    def _setup_logging(level, *, fmt_console, log_file, module_levels, colored):
        captured["level"] = level
        captured["fmt_console"] = fmt_console
        captured["log_file"] = log_file
        captured["module_levels"] = module_levels
        captured["colored"] = colored

    monkeypatch.setattr(mod, "setup_logging", _setup_logging)

    cfg = {
        "level": "WARNING",
        "format": "%(message)s",
        "file": str(tmp_path / "pricing.log"),
        "color": False,
        "module_levels": {"lattice_pricing.options": "DEBUG"},
    }
    mod.setup_logging_from_config(cfg)

    assert captured == {
        "level": "WARNING",
        "fmt_console": "%(message)s",
        "log_file": tmp_path / "pricing.log",
        "module_levels": {"lattice_pricing.options": "DEBUG"},
        "colored": False,
    }


@pytest.mark.parametrize(
    ("level", "expected"),
    [("info", logging.INFO), ("WARN", logging.WARNING), ("10", 10), (logging.ERROR, logging.ERROR)],
)
def test_coerce_level_accepts_names_digits_and_ints(level, expected) -> None:
    mod = importlib.import_module("lattice_pricing.utils.logging_config")
    assert mod.coerce_level(level) == expected


def test_coerce_level_rejects_unknown_names() -> None:
    mod = importlib.import_module("lattice_pricing.utils.logging_config")
    with pytest.raises(ValueError, match="Unknown logging level"):
        mod.coerce_level("chatty")


def test_setup_logging_writes_file_and_module_levels(tmp_path) -> None:
    mod = importlib.import_module("lattice_pricing.utils.logging_config")
    log_file = tmp_path / "nested" / "run.log"

    mod.setup_logging(
        "WARNING",
        fmt_file="%(levelname)s %(message)s",
        log_file=log_file,
        module_levels={"lattice_pricing.options": "DEBUG"},
    )
    try:
        logging.getLogger("lattice_pricing.options.engines").debug("tree built")
        logging.getLogger("other").info("hidden")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "DEBUG tree built" in text
        assert "hidden" not in text
    finally:
        logging.getLogger("lattice_pricing.options").setLevel(logging.NOTSET)
        for handler in list(logging.getLogger().handlers):
            logging.getLogger().removeHandler(handler)
            handler.close()
