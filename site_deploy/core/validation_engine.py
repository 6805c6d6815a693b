# site_deploy/core/validation_engine.py
"""Validation of platform configs against declarative field schemas"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..constants import FieldType
from ..models.platform import ConfigField

TRUE_STRINGS = {"true", "1", "yes", "on"}
FALSE_STRINGS = {"false", "0", "no", "off"}

_STRING_TYPES = (FieldType.TEXT, FieldType.PASSWORD, FieldType.FILE)


@dataclass
class ValidationResult:
    """Validation result container"""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add error message"""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add warning message"""
        self.warnings.append(message)

    def merge(self, other: 'ValidationResult') -> None:
        """Merge another result into this one"""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if not other.is_valid:
            self.is_valid = False

    def __bool__(self) -> bool:
        return self.is_valid

    def __str__(self) -> str:
        """String representation"""
        lines = []

        if self.errors:
            lines.append("Errors:")
            for error in self.errors:
                lines.append(f"  ✗ {error}")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  ⚠ {warning}")

        if self.is_valid and not self.errors and not self.warnings:
            lines.append("✓ All validations passed")

        return '\n'.join(lines)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _coerce_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return int(number) if number.is_integer() else number
    return None


def _coerce_boolean(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
    return None


class ConfigFieldValidator:
    """Validate raw config values against a platform's field schema

    The effective value of a field is the explicit config value, then the
    field's environment variable, then its declared default.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    def _env(self, environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
        if environ is not None:
            return environ
        if self._environ is not None:
            return self._environ
        return os.environ

    def resolve_value(self, config_field: ConfigField, config: Mapping[str, Any],
                      environ: Optional[Mapping[str, str]] = None) -> Any:
        """Effective value of one field"""
        value = config.get(config_field.name)
        if not _is_empty(value):
            return value

        if config_field.env_var:
            env_value = self._env(environ).get(config_field.env_var)
            if not _is_empty(env_value):
                return env_value

        return config_field.default

    def validate(self, fields: Sequence[ConfigField], config: Mapping[str, Any],
                 environ: Optional[Mapping[str, str]] = None) -> ValidationResult:
        """
        Validate config values

        Args:
            fields: Field schema of the platform
            config: Raw config values
            environ: Environment used for fallbacks (defaults to os.environ)

        Returns:
            ValidationResult with one error per failing field
        """
        result = ValidationResult()

        for config_field in fields:
            value = self.resolve_value(config_field, config, environ)

            if _is_empty(value):
                if config_field.required:
                    hint = f" (or set {config_field.env_var})" if config_field.env_var else ""
                    result.add_error(f"{config_field.label} ({config_field.name}) is required{hint}")
                continue

            error = self._check_type(config_field, value)
            if error:
                result.add_error(error)
                continue

            if config_field.pattern and isinstance(value, str):
                if not re.fullmatch(config_field.pattern, value):
                    result.add_error(
                        f"{config_field.label} ({config_field.name}) has an invalid format"
                    )

        return result

    def _check_type(self, config_field: ConfigField, value: Any) -> Optional[str]:
        name = f"{config_field.label} ({config_field.name})"

        if config_field.type in _STRING_TYPES:
            if not isinstance(value, str):
                return f"{name} must be a string"
        elif config_field.type == FieldType.NUMBER:
            if _coerce_number(value) is None:
                return f"{name} must be a number"
        elif config_field.type == FieldType.BOOLEAN:
            if _coerce_boolean(value) is None:
                return f"{name} must be a boolean"
        elif config_field.type == FieldType.SELECT:
            if value not in config_field.options:
                return f"{name} must be one of: {', '.join(config_field.options)}"

        return None

    def apply_defaults(self, fields: Sequence[ConfigField], config: Mapping[str, Any],
                       environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """
        Fill in environment and default values

        Args:
            fields: Field schema of the platform
            config: Raw config values (left untouched)
            environ: Environment used for fallbacks

        Returns:
            New config dict with resolved values; numbers and booleans read
            from strings are converted where possible
        """
        resolved = dict(config)

        for config_field in fields:
            value = self.resolve_value(config_field, config, environ)
            if _is_empty(value):
                continue

            if config_field.type == FieldType.NUMBER:
                number = _coerce_number(value)
                value = number if number is not None else value
            elif config_field.type == FieldType.BOOLEAN:
                flag = _coerce_boolean(value)
                value = flag if flag is not None else value

            resolved[config_field.name] = value

        return resolved
