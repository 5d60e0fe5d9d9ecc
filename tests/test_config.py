"""
Test settings validation and application startup helpers.
"""

import tempfile

import pytest
from pydantic import ValidationError

from dwg_gateway import main
from dwg_gateway.config import Settings


class TestSettings:
    """Test configuration defaults and validators."""

    def test_defaults(self, monkeypatch):
        for name in ("HOST", "PORT", "CONVERTER_PATH", "TEMP_DIR", "MAX_UPLOAD_SIZE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.HOST == "0.0.0.0"
        assert settings.PORT == 3000
        assert settings.CONVERTER_PATH == "/usr/local/bin/dwg2dxf"
        assert settings.SOURCE_EXTENSION == ".dwg"
        assert settings.TARGET_EXTENSION == ".dxf"
        assert settings.temp_dir == tempfile.gettempdir()

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("converter_path", "/opt/bin/dwg2dxf")

        settings = Settings(_env_file=None)

        assert settings.PORT == 8080
        assert settings.CONVERTER_PATH == "/opt/bin/dwg2dxf"

    def test_extensions_are_normalized(self):
        settings = Settings(_env_file=None, SOURCE_EXTENSION="DWG", TARGET_EXTENSION=".DXF")

        assert settings.SOURCE_EXTENSION == ".dwg"
        assert settings.TARGET_EXTENSION == ".dxf"

    @pytest.mark.parametrize("field,value", [
        ("MAX_UPLOAD_SIZE", 0),
        ("CONVERSION_TIMEOUT", 0),
        ("CONVERSION_TIMEOUT", 7200),
        ("DISCONNECT_POLL_INTERVAL", 0),
        ("LOG_LEVEL", "VERBOSE"),
        ("ENVIRONMENT", "qa"),
        ("SOURCE_EXTENSION", "."),
    ])
    def test_invalid_values_are_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_log_level_is_upper_cased(self):
        assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


class TestStartup:
    """Test tool validation and command line parsing."""

    def test_missing_tool_is_fatal_in_production(self, monkeypatch, tmp_path):
        monkeypatch.setattr(main, "settings", Settings(
            _env_file=None,
            ENVIRONMENT="production",
            CONVERTER_PATH=str(tmp_path / "no-such-dwg2dxf"),
        ))

        with pytest.raises(RuntimeError):
            main.validate_tool_paths()

    def test_missing_tool_is_a_warning_in_development(self, monkeypatch, tmp_path):
        monkeypatch.setattr(main, "settings", Settings(
            _env_file=None,
            ENVIRONMENT="development",
            CONVERTER_PATH=str(tmp_path / "no-such-dwg2dxf"),
        ))

        main.validate_tool_paths()

    def test_existing_tool_passes(self, monkeypatch, make_tool):
        monkeypatch.setattr(main, "settings", Settings(
            _env_file=None,
            ENVIRONMENT="production",
            CONVERTER_PATH=str(make_tool("exit 0")),
        ))

        main.validate_tool_paths()

    def test_tool_path_is_not_looked_up_by_basename(self, monkeypatch, tmp_path):
        """An absolute path that does not exist fails even if its basename is on PATH."""
        monkeypatch.setattr(main, "settings", Settings(
            _env_file=None,
            ENVIRONMENT="production",
            CONVERTER_PATH=str(tmp_path / "sh"),
        ))

        with pytest.raises(RuntimeError):
            main.validate_tool_paths()

    def test_bare_tool_name_is_looked_up_on_path(self, monkeypatch):
        """A bare executable name is resolved through PATH, as exec does."""
        monkeypatch.setattr(main, "settings", Settings(
            _env_file=None,
            ENVIRONMENT="production",
            CONVERTER_PATH="sh",
        ))

        main.validate_tool_paths()

    def test_parse_args_short_flags(self):
        args = main.parse_args(["-H", "127.0.0.1", "-P", "9000"])

        assert args.host == "127.0.0.1"
        assert args.port == 9000

    def test_parse_args_defaults(self):
        args = main.parse_args([])

        assert args.host == main.settings.HOST
        assert args.port == main.settings.PORT
