"""Tests for config field validation."""

from site_deploy.constants import FieldType
from site_deploy.core.validation_engine import ConfigFieldValidator, ValidationResult
from site_deploy.models.platform import ConfigField

HOST = ConfigField("host", "Server host", FieldType.TEXT, required=True, env_var="SSH_HOST")
PORT = ConfigField("port", "Port", FieldType.NUMBER, default=22)
CLEAN = ConfigField("clean_remote", "Clean remote", FieldType.BOOLEAN, default=False)
MODE = ConfigField("mode", "Mode", FieldType.SELECT, options=["fast", "safe"])
REPO = ConfigField("repo", "Repository", FieldType.TEXT, required=True, pattern=r"[\w.-]+/[\w.-]+")


class TestValidationResult:
    """Test result accumulation."""

    def test_starts_valid(self):
        result = ValidationResult()
        assert result.is_valid
        assert result.errors == []

    def test_error_invalidates(self):
        result = ValidationResult()
        result.add_error("broken")
        assert not result.is_valid
        assert not result

    def test_warning_keeps_valid(self):
        result = ValidationResult()
        result.add_warning("careful")
        assert result.is_valid
        assert result.warnings == ["careful"]

    def test_merge(self):
        first = ValidationResult()
        second = ValidationResult()
        second.add_error("bad")
        second.add_warning("hmm")

        first.merge(second)

        assert not first.is_valid
        assert first.errors == ["bad"]
        assert first.warnings == ["hmm"]


class TestValidate:
    """Test validation of raw config values."""

    def test_missing_required_field(self):
        result = ConfigFieldValidator({}).validate([HOST], {})

        assert not result.is_valid
        assert result.errors == ["Server host (host) is required (or set SSH_HOST)"]

    def test_blank_string_counts_as_missing(self):
        result = ConfigFieldValidator({}).validate([HOST], {"host": "   "})
        assert not result.is_valid

    def test_environment_fallback_satisfies_required(self):
        result = ConfigFieldValidator({"SSH_HOST": "example.com"}).validate([HOST], {})
        assert result.is_valid

    def test_explicit_environ_argument_wins(self):
        validator = ConfigFieldValidator({})
        result = validator.validate([HOST], {}, environ={"SSH_HOST": "example.com"})
        assert result.is_valid

    def test_number_accepts_numeric_string(self):
        result = ConfigFieldValidator({}).validate([PORT], {"port": "2222"})
        assert result.is_valid

    def test_number_rejects_text(self):
        result = ConfigFieldValidator({}).validate([PORT], {"port": "ssh"})
        assert result.errors == ["Port (port) must be a number"]

    def test_number_rejects_bool(self):
        result = ConfigFieldValidator({}).validate([PORT], {"port": True})
        assert not result.is_valid

    def test_boolean_accepts_strings(self):
        validator = ConfigFieldValidator({})
        assert validator.validate([CLEAN], {"clean_remote": "yes"}).is_valid
        assert validator.validate([CLEAN], {"clean_remote": "false"}).is_valid

    def test_boolean_rejects_other_values(self):
        result = ConfigFieldValidator({}).validate([CLEAN], {"clean_remote": "maybe"})
        assert not result.is_valid

    def test_select_checks_options(self):
        validator = ConfigFieldValidator({})
        assert validator.validate([MODE], {"mode": "fast"}).is_valid

        result = validator.validate([MODE], {"mode": "reckless"})
        assert result.errors == ["Mode (mode) must be one of: fast, safe"]

    def test_pattern(self):
        validator = ConfigFieldValidator({})
        assert validator.validate([REPO], {"repo": "octo/site"}).is_valid

        result = validator.validate([REPO], {"repo": "not a repo"})
        assert result.errors == ["Repository (repo) has an invalid format"]

    def test_optional_missing_field_is_fine(self):
        result = ConfigFieldValidator({}).validate([MODE], {})
        assert result.is_valid

    def test_one_error_per_field(self):
        result = ConfigFieldValidator({}).validate([HOST, REPO, PORT], {"port": "x"})
        assert len(result.errors) == 3

    def test_does_not_mutate_config(self):
        config = {"port": "22"}
        ConfigFieldValidator({}).validate([HOST, PORT], config)
        assert config == {"port": "22"}


class TestApplyDefaults:
    """Test resolution of effective values."""

    def test_fills_defaults_and_env(self):
        resolved = ConfigFieldValidator({"SSH_HOST": "env-host"}).apply_defaults(
            [HOST, PORT, CLEAN], {}
        )
        assert resolved == {"host": "env-host", "port": 22, "clean_remote": False}

    def test_explicit_value_beats_env(self):
        resolved = ConfigFieldValidator({"SSH_HOST": "env-host"}).apply_defaults(
            [HOST], {"host": "config-host"}
        )
        assert resolved["host"] == "config-host"

    def test_coerces_numbers_and_booleans(self):
        resolved = ConfigFieldValidator({}).apply_defaults(
            [PORT, CLEAN], {"port": "2222", "clean_remote": "true"}
        )
        assert resolved["port"] == 2222
        assert resolved["clean_remote"] is True

    def test_keeps_unknown_keys(self):
        resolved = ConfigFieldValidator({}).apply_defaults([PORT], {"extra": 1})
        assert resolved["extra"] == 1
