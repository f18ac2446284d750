"""Tests for the package logging setup."""

import logging

import irt_sim


class TestLoggingSetup:
    def test_console_handler_on_root(self) -> None:
        assert irt_sim.console_handler in logging.getLogger().handlers

    def test_only_package_dependencies_quieted(self) -> None:
        assert logging.getLogger("numexpr").level == logging.WARNING
        assert logging.getLogger("asyncio").level == logging.NOTSET
