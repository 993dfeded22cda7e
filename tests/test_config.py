"""
Tests for Settings and CleanupConfig
"""

import pytest

from gmail_housekeeping.config import Settings
from gmail_housekeeping.errors import ConfigurationError
from gmail_housekeeping.models import CleanupConfig


class TestSettingsFromEnv:
    """Tests for Settings.from_env"""

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.credentials_path == 'credentials.json'
        assert settings.token_path == 'token.json'
        assert settings.client_id is None
        assert settings.redirect_uri == 'http://localhost:3000/oauth2callback'
        assert settings.auth_code is None
        assert settings.log_level == 'WARNING'

    def test_values_from_environment(self):
        settings = Settings.from_env({
            'CLIENT_ID': 'cid',
            'CLIENT_SECRET': 'secret',
            'REDIRECT_URI': 'http://localhost:9999/cb',
            'AUTH_CODE': ' 4/code ',
            'GMAIL_CREDENTIALS_PATH': 'data/credentials.json',
            'GMAIL_TOKEN_PATH': 'data/token.json',
            'LOG_LEVEL': 'debug',
        })

        assert settings.client_id == 'cid'
        assert settings.client_secret == 'secret'
        assert settings.redirect_uri == 'http://localhost:9999/cb'
        assert settings.auth_code == '4/code'
        assert settings.credentials_path == 'data/credentials.json'
        assert settings.token_path == 'data/token.json'
        assert settings.log_level == 'DEBUG'

    def test_blank_values_ignored(self):
        settings = Settings.from_env({'CLIENT_ID': '', 'REDIRECT_URI': '', 'AUTH_CODE': '   '})

        assert settings.client_id is None
        assert settings.redirect_uri == 'http://localhost:3000/oauth2callback'
        assert settings.auth_code is None


class TestCleanupConfigValidate:
    """Tests for CleanupConfig.validate"""

    def test_senders_only_is_valid(self):
        CleanupConfig(senders=['a@x.com']).validate()

    def test_subjects_only_is_valid(self):
        CleanupConfig(subjects=['Promo']).validate()

    def test_no_criteria_rejected(self):
        with pytest.raises(ConfigurationError):
            CleanupConfig().validate()

    def test_non_positive_max_results_rejected(self):
        with pytest.raises(ConfigurationError):
            CleanupConfig(senders=['a@x.com'], max_results=0).validate()

    def test_large_max_results_accepted(self):
        """Clamping happens at search time, not here"""
        CleanupConfig(senders=['a@x.com'], max_results=1000).validate()
