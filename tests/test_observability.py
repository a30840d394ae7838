import logging
from unittest.mock import patch

from kanopi_pack.core.observability import configure_observability


class TestConfigureObservability:
    """Test process logging setup."""

    @patch("kanopi_pack.core.observability.logfire.configure")
    @patch("kanopi_pack.core.observability.settings")
    def test_logfire_configured_with_token(self, mock_settings, mock_configure):
        mock_settings.LOG_LEVEL = "INFO"
        mock_settings.LOGFIRE_TOKEN = "real-token"

        configure_observability()

        mock_configure.assert_called_once_with(token="real-token")

    @patch("kanopi_pack.core.observability.logfire.configure")
    @patch("kanopi_pack.core.observability.settings")
    def test_logfire_skipped_without_token(self, mock_settings, mock_configure):
        mock_settings.LOG_LEVEL = "DEBUG"
        mock_settings.LOGFIRE_TOKEN = ""

        configure_observability()

        mock_configure.assert_not_called()

    @patch("kanopi_pack.core.observability.logfire.configure", side_effect=RuntimeError("offline"))
    @patch("kanopi_pack.core.observability.settings")
    def test_logfire_failure_is_logged(self, mock_settings, mock_configure, caplog):
        mock_settings.LOG_LEVEL = "INFO"
        mock_settings.LOGFIRE_TOKEN = "real-token"

        with caplog.at_level(logging.WARNING):
            configure_observability()

        assert "Failed to configure Logfire" in caplog.text
