"""Deployment result, progress, log and history models"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..constants import DeployLogLevel, DeployPhase, DeployStatus


def utcnow() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp written by ``to_dict``"""
    if not value:
        return None
    return datetime.fromisoformat(value)


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class DeployResult:
    """Outcome of one deployment attempt"""

    success: bool
    url: Optional[str] = None
    preview_url: Optional[str] = None
    deploy_id: Optional[str] = None
    error: Optional[str] = None
    error_details: Optional[str] = None
    duration: Optional[float] = None
    timestamp: datetime = field(default_factory=utcnow)
    platform_info: Dict[str, Any] = field(default_factory=dict)
    cancelled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "success": self.success,
            "timestamp": _format_timestamp(self.timestamp),
        }

        if self.url:
            data["url"] = self.url
        if self.preview_url:
            data["preview_url"] = self.preview_url
        if self.deploy_id:
            data["deploy_id"] = self.deploy_id
        if self.error:
            data["error"] = self.error
        if self.error_details:
            data["error_details"] = self.error_details
        if self.duration is not None:
            data["duration"] = self.duration
        if self.platform_info:
            data["platform_info"] = self.platform_info
        if self.cancelled:
            data["cancelled"] = True

        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeployResult":
        """Create from dictionary"""
        return cls(
            success=bool(data.get("success", False)),
            url=data.get("url"),
            preview_url=data.get("preview_url"),
            deploy_id=data.get("deploy_id"),
            error=data.get("error"),
            error_details=data.get("error_details"),
            duration=data.get("duration"),
            timestamp=parse_timestamp(data.get("timestamp")) or utcnow(),
            platform_info=data.get("platform_info", {}),
            cancelled=bool(data.get("cancelled", False)),
        )


@dataclass
class DeployProgress:
    """Progress snapshot emitted during a deployment"""

    phase: DeployPhase
    progress: float = 0
    phase_progress: float = 0
    message: str = ""
    estimated_time_remaining: Optional[float] = None
    files_uploaded: Optional[int] = None
    total_files: Optional[int] = None
    bytes_uploaded: Optional[int] = None
    total_bytes: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "phase": self.phase.value,
            "progress": self.progress,
            "phase_progress": self.phase_progress,
            "message": self.message,
        }
        for key in ("estimated_time_remaining", "files_uploaded", "total_files",
                    "bytes_uploaded", "total_bytes"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass
class DeployLogEntry:
    """Single line of a deployment log"""

    level: DeployLogLevel
    message: str
    phase: Optional[DeployPhase] = None
    data: Any = None
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "timestamp": _format_timestamp(self.timestamp),
            "level": self.level.value,
            "message": self.message,
        }
        if self.phase:
            data["phase"] = self.phase.value
        if self.data is not None:
            data["data"] = self.data
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeployLogEntry":
        """Create from dictionary"""
        phase = data.get("phase")
        return cls(
            level=DeployLogLevel(data.get("level", DeployLogLevel.INFO.value)),
            message=data.get("message", ""),
            phase=DeployPhase(phase) if phase else None,
            data=data.get("data"),
            timestamp=parse_timestamp(data.get("timestamp")) or utcnow(),
        )


@dataclass(frozen=True)
class DeployHistoryEntry:
    """Persisted record of one deployment attempt"""

    id: str
    platform: str
    status: DeployStatus
    result: Optional[DeployResult]
    config: Dict[str, Any]
    start_time: datetime
    end_time: Optional[datetime] = None
    logs: List[DeployLogEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "platform": self.platform,
            "status": self.status.value,
            "result": self.result.to_dict() if self.result else None,
            "config": self.config,
            "start_time": _format_timestamp(self.start_time),
            "end_time": _format_timestamp(self.end_time),
            "logs": [entry.to_dict() for entry in self.logs],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeployHistoryEntry":
        """Create from dictionary"""
        result = data.get("result")
        return cls(
            id=data["id"],
            platform=data["platform"],
            status=DeployStatus(data["status"]),
            result=DeployResult.from_dict(result) if result else None,
            config=data.get("config", {}),
            start_time=parse_timestamp(data.get("start_time")) or utcnow(),
            end_time=parse_timestamp(data.get("end_time")),
            logs=[DeployLogEntry.from_dict(e) for e in data.get("logs", [])],
        )


@dataclass
class SavedDeployConfig:
    """Named, reusable deployment configuration"""

    name: str
    platform: str
    config: Dict[str, Any]
    is_default: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    last_deploy_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "name": self.name,
            "platform": self.platform,
            "config": self.config,
            "is_default": self.is_default,
            "created_at": _format_timestamp(self.created_at),
            "updated_at": _format_timestamp(self.updated_at),
        }
        if self.last_deploy_at:
            data["last_deploy_at"] = _format_timestamp(self.last_deploy_at)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedDeployConfig":
        """Create from dictionary"""
        return cls(
            name=data["name"],
            platform=data["platform"],
            config=data.get("config", {}),
            is_default=bool(data.get("is_default", False)),
            created_at=parse_timestamp(data.get("created_at")) or utcnow(),
            updated_at=parse_timestamp(data.get("updated_at")) or utcnow(),
            last_deploy_at=parse_timestamp(data.get("last_deploy_at")),
        )


@dataclass(frozen=True)
class DeploymentSnapshot:
    """Read-only view of the in-flight deployment"""

    id: str
    platform: str
    status: DeployStatus
    progress: DeployProgress
    logs_count: int
    start_time: datetime
    duration: float
