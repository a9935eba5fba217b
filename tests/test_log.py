"""Tests for the round logger."""

import io
import logging
import re

from fluq.log import RoundFormatter, RoundLogger, configure_logging, render


def _captured(name):
    stream = io.StringIO()
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(RoundFormatter())
    logger.addHandler(handler)
    return RoundLogger(logger=logger), stream


class _BrokenLogger:
    def log(self, *args, **kwargs):
        raise OSError("disk full")


class TestRender:
    def test_string(self):
        assert render("hello") == "hello"

    def test_object(self):
        assert render({"a": 1}) == '{"a": 1}'

    def test_details(self):
        assert render("score:", 5) == "score: 5"

    def test_unserialisable_falls_back_to_str(self):
        assert "object" in render(object())


class TestRoundLogger:
    def test_line_format(self):
        log, stream = _captured("fluq.test.format")
        log.info("Commit verified locally.")
        line = stream.getvalue().strip()
        assert re.match(r"^\[\d{4}-\d\d-\d\d \d\d:\d\d:\d\d\.\d{3}\] \[INFO\] Commit verified locally\.$", line)

    def test_levels(self):
        log, stream = _captured("fluq.test.levels")
        log.debug("d")
        log.info("i")
        log.warn("w")
        log.error("e")
        out = stream.getvalue()
        for tag in ("[DEBUG] d", "[INFO] i", "[WARN] w", "[ERROR] e"):
            assert tag in out

    def test_broken_sink_never_raises(self):
        log = RoundLogger(logger=_BrokenLogger())
        log.info("still fine")
        log.error({"x": 1})


class TestConfigure:
    def test_file_sink(self, tmp_path):
        path = tmp_path / "round.log"
        logger = configure_logging(log_file=path, stream=io.StringIO())
        try:
            RoundLogger().info("to file")
            for h in logger.handlers:
                h.flush()
            assert "[INFO] to file" in path.read_text()
        finally:
            for h in list(logger.handlers):
                h.close()
                logger.removeHandler(h)

    def test_single_console_handler(self):
        logger = configure_logging(stream=io.StringIO())
        configure_logging(stream=io.StringIO())
        try:
            consoles = [h for h in logger.handlers if getattr(h, "fluq_console", False)]
            assert len(consoles) == 1
        finally:
            for h in list(logger.handlers):
                logger.removeHandler(h)
