"""
Unit tests for application settings.
"""

import pytest

from time_reporting.config import DEFAULT_JWT_SECRET, Settings


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.validation_fail_fast is False
        assert settings.clear_decline_comment_on_resubmit is False
        assert settings.acl_claim_name == "extn.TimeReportingACL"
        assert settings.is_sqlite

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("VALIDATION_FAIL_FAST", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.validation_fail_fast is True
        assert settings.log_level == "DEBUG"

    def test_production_rejects_default_secret(self):
        settings = Settings(_env_file=None, environment="production", jwt_secret_key=DEFAULT_JWT_SECRET)

        with pytest.raises(ValueError):
            settings.validate_environment()

    def test_production_with_secret(self):
        settings = Settings(_env_file=None, environment="production", jwt_secret_key="s3cret")

        assert settings.is_production
        settings.validate_environment()
