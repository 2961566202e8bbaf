"""Tests for configuration loading."""

from pathlib import Path

from libraryloans.config import Config, get_config, reset_config


class TestConfig:
    """Tests for Config."""

    def test_defaults(self, monkeypatch):
        """Test values used when nothing is set."""
        for name in (
            "LIBRARYLOANS_DB_PATH",
            "LIBRARYLOANS_RENEWAL_DAYS",
            "LIBRARYLOANS_PAGE_SIZE",
            "LIBRARYLOANS_INSTITUTION",
            "LIBRARYLOANS_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        config = Config.from_env()

        assert config.db_path == Path.home() / ".libraryloans" / "library.db"
        assert config.renewal_days == 7
        assert config.page_size == 10
        assert config.institution_name == "School Library"
        assert config.log_level == "WARNING"

    def test_from_env(self, monkeypatch, tmp_path):
        """Test environment overrides."""
        monkeypatch.setenv("LIBRARYLOANS_DB_PATH", str(tmp_path / "lib.db"))
        monkeypatch.setenv("LIBRARYLOANS_RENEWAL_DAYS", "14")
        monkeypatch.setenv("LIBRARYLOANS_PAGE_SIZE", "25")
        monkeypatch.setenv("LIBRARYLOANS_INSTITUTION", "Escola Estadual")
        monkeypatch.setenv("LIBRARYLOANS_LOG_LEVEL", "info")

        config = Config.from_env()

        assert config.db_path == tmp_path / "lib.db"
        assert config.renewal_days == 14
        assert config.page_size == 25
        assert config.institution_name == "Escola Estadual"
        assert config.log_level == "INFO"
        assert config.validate() == []

    def test_validate_policy(self, tmp_path):
        """Test nonsensical policy values are reported."""
        config = Config(
            db_path=tmp_path / "lib.db",
            renewal_days=0,
            page_size=0,
            institution_name="X",
            log_level="INFO",
        )
        errors = config.validate()
        assert len(errors) == 2

    def test_global_instance(self, monkeypatch):
        """Test get_config caches until reset."""
        reset_config()
        monkeypatch.setenv("LIBRARYLOANS_PAGE_SIZE", "50")
        first = get_config()
        assert get_config() is first
        assert first.page_size == 50

        reset_config()
        monkeypatch.setenv("LIBRARYLOANS_PAGE_SIZE", "25")
        assert get_config().page_size == 25
        reset_config()
