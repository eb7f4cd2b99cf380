"""
Tests for configuration loading from the environment.
"""

import citeregistry
from citeregistry.config import VERSION, Config
from citeregistry.journal_formatter import JournalFormatter
from citeregistry import logging_setup


class TestConfig:
    """Test environment overrides and validation."""

    def test_defaults(self, monkeypatch):
        """Defaults apply when the environment is clean."""
        for key in ("MAX_REFERENCES", "LINE_WIDTH", "HARD_SPLIT_OFFSET", "DOI_URL_PREFIX", "LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)
        config = Config()
        assert config.MAX_REFERENCES == 1024
        assert config.LINE_WIDTH == 71
        assert config.HARD_SPLIT_OFFSET == 69
        assert config.DOI_URL_PREFIX == "https://doi.org/"
        assert config.LOG_LEVEL == "INFO"

    def test_environment_override(self, monkeypatch):
        """Environment variables override the defaults."""
        monkeypatch.setenv("MAX_REFERENCES", "16")
        monkeypatch.setenv("LINE_WIDTH", "80")
        monkeypatch.setenv("DOI_URL_PREFIX", "https://dx.doi.org/")
        config = Config()
        assert config.MAX_REFERENCES == 16
        assert config.LINE_WIDTH == 80
        assert config.DOI_URL_PREFIX == "https://dx.doi.org/"

    def test_invalid_values_fall_back(self, monkeypatch):
        """Out of range or unparsable values fall back to defaults."""
        monkeypatch.setenv("MAX_REFERENCES", "-3")
        monkeypatch.setenv("LINE_WIDTH", "not-a-number")
        monkeypatch.setenv("HARD_SPLIT_OFFSET", "500")
        monkeypatch.setenv("LOG_LEVEL", "CHATTY")
        monkeypatch.setenv("AGGREGATION_TIMEOUT", "-1")
        config = Config()
        assert config.MAX_REFERENCES == 1024
        assert config.LINE_WIDTH == 71
        assert config.HARD_SPLIT_OFFSET == 69
        assert config.LOG_LEVEL == "INFO"
        assert config.AGGREGATION_TIMEOUT == 0.0

    def test_bool_parsing(self, monkeypatch):
        """Boolean settings accept yes/no style words."""
        monkeypatch.setenv("VERBOSE", "yes")
        assert Config().VERBOSE is True
        monkeypatch.setenv("VERBOSE", "off")
        assert Config().VERBOSE is False

    def test_to_dict(self):
        """to_dict lists the settings."""
        assert set(Config().to_dict()) >= {'MAX_REFERENCES', 'LINE_WIDTH', 'DOI_URL_PREFIX'}

    def test_package_version(self):
        """The package version comes from the config module."""
        assert citeregistry.__version__ == VERSION

    def test_formatter_uses_explicit_settings(self):
        """Explicit formatter arguments win over config."""
        formatter = JournalFormatter(line_width=60, split_offset=50, doi_url_prefix="doi:")
        assert (formatter.line_width, formatter.split_offset) == (60, 50)
        assert formatter.doi_link("10.1/x") == "doi:10.1/x"


class TestLogging:
    """Test logging setup."""

    def teardown_method(self):
        logging_setup.reset_logging()

    def test_file_logging(self, tmp_path):
        """File logging writes the main and error logs."""
        logging_setup.reset_logging()
        logging_setup.setup_logging(enable_file_logging=True, log_dir=tmp_path)
        from loguru import logger
        logger.error("registry test error")
        logger.complete()
        assert (tmp_path / "citeregistry.log").exists()
        assert (tmp_path / "errors.log").exists()

    def test_setup_only_once(self, tmp_path):
        """A second setup_logging call is ignored."""
        logging_setup.reset_logging()
        logging_setup.setup_logging()
        logging_setup.setup_logging(enable_file_logging=True, log_dir=tmp_path)
        assert not (tmp_path / "citeregistry.log").exists()
