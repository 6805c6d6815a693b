"""Platform metadata and config field schema models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import FieldType


@dataclass(frozen=True)
class ConfigField:
    """Declarative description of one platform config value"""

    name: str
    label: str
    type: FieldType = FieldType.TEXT
    required: bool = False
    default: Any = None
    placeholder: Optional[str] = None
    help: Optional[str] = None
    options: List[str] = field(default_factory=list)
    pattern: Optional[str] = None
    env_var: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "name": self.name,
            "label": self.label,
            "type": self.type.value,
            "required": self.required,
        }
        for key in ("default", "placeholder", "help", "pattern", "env_var"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.options:
            data["options"] = list(self.options)
        return data


@dataclass(frozen=True)
class PlatformInfo:
    """Static description of a deploy platform"""

    id: str
    name: str
    icon: str = ""
    description: str = ""
    docs_url: Optional[str] = None
    requires_auth: bool = False
    auth_type: Optional[str] = None  # token, password, key
    supports_preview: bool = False
    supports_custom_domain: bool = False
    supports_rollback: bool = False
    config_fields: List[ConfigField] = field(default_factory=list)

    @property
    def required_fields(self) -> List[str]:
        return [f.name for f in self.config_fields if f.required]

    def get_field(self, name: str) -> Optional[ConfigField]:
        for config_field in self.config_fields:
            if config_field.name == name:
                return config_field
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "description": self.description,
            "docs_url": self.docs_url,
            "requires_auth": self.requires_auth,
            "auth_type": self.auth_type,
            "supports_preview": self.supports_preview,
            "supports_custom_domain": self.supports_custom_domain,
            "supports_rollback": self.supports_rollback,
            "config_fields": [f.to_dict() for f in self.config_fields],
        }
