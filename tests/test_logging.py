"""Tests for the console logger."""

import pytest

from chip8vm.logging import ConsoleLogger


def test_level_filtering(capsys):
    logger = ConsoleLogger("test", log_level="WARNING", use_colors=False, show_timestamps=False)

    logger.info("hidden")
    logger.error("shown")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "[   ERROR][test] shown" in out


def test_set_level():
    logger = ConsoleLogger("test", log_level="ERROR")
    assert not logger.is_enabled_for("DEBUG")

    logger.set_level("debug")
    assert logger.is_enabled_for("DEBUG")

    with pytest.raises(ValueError):
        logger.set_level("verbose")
