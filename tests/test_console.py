"""Tests for console.py module."""

from unittest.mock import patch

import pytest
from rich.panel import Panel

from kubeseal_provider import console


class TestConsoleOutput:
    """Tests for console output functions."""

    @pytest.mark.parametrize(
        ("func", "icon"),
        [
            (console.info, "ℹ"),
            (console.success, "✓"),
            (console.warning, "⚠"),
            (console.error, "✗"),
            (console.action, "→"),
            (console.step, "•"),
        ],
    )
    def test_message_icons(self, func, icon):
        """Test that each message kind carries its icon and text."""
        with patch.object(console.console, "print") as mock_print:
            func("Sealing db-credentials")

            mock_print.assert_called_once()
            call_arg = mock_print.call_args[0][0]
            assert icon in call_arg
            assert "Sealing db-credentials" in call_arg

    def test_highlight_returns_markup(self):
        """Test highlight returns Rich markup."""
        assert console.highlight("ctx1") == "[highlight]ctx1[/highlight]"

    def test_console_writes_to_stderr(self):
        """Test that status output stays off stdout."""
        assert console.console.stderr is True


class TestConsoleSpinner:
    """Tests for spinner context manager."""

    def test_spinner_wraps_status(self):
        """Test that the spinner shows the message while the block runs."""
        with patch.object(console.console, "status") as mock_status:
            with console.spinner("Reading kubeconfig..."):
                pass

            mock_status.assert_called_once()
            assert "Reading kubeconfig..." in mock_status.call_args[0][0]


class TestConsoleSummaryPanel:
    """Tests for summary panel."""

    def test_summary_panel(self):
        """Test that the summary is printed as one panel with the title."""
        with patch.object(console.console, "print") as mock_print:
            console.summary_panel("Sealed Secret Created", {"Name": "db-credentials", "Scope": "strict"})

            mock_print.assert_called_once()
            panel = mock_print.call_args[0][0]
            assert isinstance(panel, Panel)
            assert "Sealed Secret Created" in str(panel.title)
