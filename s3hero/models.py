"""Data models for S3Hero profiles and check results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ProviderType(Enum):
    """Kind of S3 service a profile talks to."""

    AWS = "aws"
    CLOUDFLARE = "cloudflare"
    CUSTOM = "custom"


class ResultStatus(Enum):
    """Status of a check, audit or smoke test."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    ERROR = "error"


@dataclass
class Profile:
    """An S3 connection profile."""

    name: str
    provider: ProviderType
    access_key_id: str
    secret_access_key: str
    region: str = ""
    endpoint: Optional[str] = None
    account_id: Optional[str] = None  # Cloudflare R2 only

    def to_dict(self) -> dict[str, Any]:
        """Convert to the on-disk JSON representation.

        Optional fields are omitted when empty.
        """
        data: dict[str, Any] = {
            "name": self.name,
            "provider": self.provider.value,
            "access_key_id": self.access_key_id,
            "secret_access_key": self.secret_access_key,
            "region": self.region,
        }
        if self.endpoint:
            data["endpoint"] = self.endpoint
        if self.account_id:
            data["account_id"] = self.account_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Build a profile from its JSON representation.

        Raises:
            ValueError: If the provider is unknown.
            KeyError: If a required key is missing.
        """
        return cls(
            name=data["name"],
            provider=ProviderType(data["provider"]),
            access_key_id=data["access_key_id"],
            secret_access_key=data["secret_access_key"],
            region=data.get("region", ""),
            endpoint=data.get("endpoint") or None,
            account_id=data.get("account_id") or None,
        )


@dataclass
class Config:
    """All S3Hero configuration."""

    default_profile: str = ""
    profiles: dict[str, Profile] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "default_profile": self.default_profile,
            "profiles": {
                name: profile.to_dict() for name, profile in self.profiles.items()
            },
        }
