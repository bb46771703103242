import io

import pytest

from sitemap_diff.logger import DiagnosticLogger, default_logger


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def logger(stream):
    return DiagnosticLogger("info", name="sitemap_diff.tests", stream=stream)


def emit_all(lg):
    lg.debug("d")
    lg.info("i")
    lg.log("l")
    lg.warn("w")
    lg.error("e")


def test_threshold_filters_lower_levels(logger, stream):
    logger.set_level("warn")
    emit_all(logger)
    assert stream.getvalue().splitlines() == ["[WARN] w", "[ERROR] e"]


def test_log_level_has_no_prefix(logger, stream):
    emit_all(logger)
    assert stream.getvalue().splitlines() == ["[INFO] i", "l", "[WARN] w", "[ERROR] e"]


def test_error_always_emitted(logger, stream):
    logger.set_level("error")
    emit_all(logger)
    assert stream.getvalue().splitlines() == ["[ERROR] e"]


def test_aliases(logger):
    logger.set_level("verbose")
    assert logger.get_level() == "debug"
    logger.set_level("quiet")
    assert logger.get_level() == "log"


@pytest.mark.parametrize("level", ["loud", "", "WARNING"])
def test_invalid_level_raises(logger, level):
    with pytest.raises(ValueError):
        logger.set_level(level)


def test_invalid_level_in_constructor():
    with pytest.raises(ValueError):
        DiagnosticLogger("chatty", name="sitemap_diff.tests.bad")


def test_non_string_level_raises(logger):
    with pytest.raises(ValueError):
        logger.set_level(3)


def test_temporary_level_and_reset(logger):
    assert logger.set_temporary_level("debug") is True
    assert logger.get_level() == "debug"
    logger.reset_level()
    assert logger.get_level() == "info"
    # a second reset is a no-op
    logger.reset_level()
    assert logger.get_level() == "info"


def test_temporary_level_same_as_current(logger):
    assert logger.set_temporary_level("info") is False
    assert logger.set_temporary_level(None) is False
    logger.reset_level()
    assert logger.get_level() == "info"


def test_temporary_level_invalid_keeps_current(logger):
    with pytest.raises(ValueError):
        logger.set_temporary_level("nope")
    assert logger.get_level() == "info"


def test_temporary_level_context_restores_on_error(logger):
    with pytest.raises(RuntimeError):
        with logger.temporary_level("error"):
            assert logger.get_level() == "error"
            raise RuntimeError("boom")
    assert logger.get_level() == "info"


def test_temporary_level_context_without_level(logger):
    with logger.temporary_level(None):
        assert logger.get_level() == "info"
    assert logger.get_level() == "info"


def test_set_debug(logger, stream):
    logger.set_debug(True)
    assert logger.get_level() == "debug"
    assert "[DEBUG] Debug mode is enabled" in stream.getvalue()
    logger.set_debug(False)
    assert logger.get_level() == "info"


def test_format_arguments(logger, stream):
    logger.info("%s paths", 3)
    assert stream.getvalue() == "[INFO] 3 paths\n"


def test_instances_do_not_share_output(capsys):
    buffer = io.StringIO()
    DiagnosticLogger("info", stream=buffer)
    default_logger.error("from default")
    assert buffer.getvalue() == ""
    assert "[ERROR] from default" in capsys.readouterr().err


def test_unnamed_instances_are_independent():
    first, second = io.StringIO(), io.StringIO()
    lg1 = DiagnosticLogger("info", stream=first)
    lg2 = DiagnosticLogger("info", stream=second)
    lg1.warn("one")
    lg2.warn("two")
    assert first.getvalue() == "[WARN] one\n"
    assert second.getvalue() == "[WARN] two\n"


def test_console_output_follows_current_stderr(capsys):
    lg = DiagnosticLogger("info")
    lg.info("first")
    assert capsys.readouterr().err == "[INFO] first\n"
    lg.info("second")
    assert capsys.readouterr().err == "[INFO] second\n"
