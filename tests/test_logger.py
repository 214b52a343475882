"""
Tests for the component-tagged logger.
"""
import io

import pytest


@pytest.fixture
def log_stream():
    from empathy_engine.logger import configure_logging

    stream = io.StringIO()
    configure_logging(enabled=True, show_debug=False, show_timestamps=False, stream=stream)
    yield stream
    configure_logging(enabled=False)


class TestLogger:

    def test_line_has_component_and_extras(self, log_stream):
        from empathy_engine.logger import log

        log.cache("Eviction pass", removed=3)

        line = log_stream.getvalue()
        assert "[CACHE  ]" in line
        assert "Eviction pass" in line
        assert "removed=" in line and "3" in line

    def test_debug_hidden_unless_enabled(self, log_stream):
        from empathy_engine.logger import Component, log, settings

        log.debug("hidden", component=Component.MEMORY)
        assert log_stream.getvalue() == ""

        settings.show_debug = True
        log.debug("shown", component=Component.MEMORY)
        assert "DEBUG" in log_stream.getvalue()

    def test_component_filter(self, log_stream):
        from empathy_engine.logger import Component, Level, log, settings

        settings.components = {"ENGINE"}

        assert log.format(Component.CACHE, "x") == ""
        assert log.format(Component.ENGINE, "x") != ""
        assert "WARN" in log.format(Component.ENGINE, "x", Level.WARN)

    def test_disabled_writes_nothing(self):
        from empathy_engine.logger import Component, log

        # conftest disables logging for the whole session
        assert log.format(Component.ENGINE, "x") == ""

    def test_computation_timing(self, log_stream):
        from empathy_engine.logger import log

        log.computation_start("u1", pain_count=2, mood_count=3)
        elapsed = log.computation_end("u1")

        assert elapsed >= 0
        assert log.computation_end("u1") == 0.0
        output = log_stream.getvalue()
        assert "METRICS START" in output
        assert "METRICS END" in output
