"""Configuration for storage backends."""

import os
from dataclasses import dataclass
from typing import Literal

from objectstorage.errors import ConfigError


@dataclass(frozen=True)
class SpacesConfig:
    """Connection configuration for a DigitalOcean Spaces bucket."""

    region: str
    bucket: str
    auth_key: str = ""
    auth_secret: str = ""

    def validate(self) -> None:
        """Validate connection configuration."""
        if not self.region:
            raise ConfigError("config.region is not provided")
        if not self.bucket:
            raise ConfigError("config.bucket is not provided")

    @classmethod
    def from_env(cls, prefix: str = "SPACES_") -> "SpacesConfig":
        """Read REGION, BUCKET, KEY and SECRET from the environment."""
        return cls(
            region=os.environ.get(f"{prefix}REGION", ""),
            bucket=os.environ.get(f"{prefix}BUCKET", ""),
            auth_key=os.environ.get(f"{prefix}KEY", ""),
            auth_secret=os.environ.get(f"{prefix}SECRET", ""),
        )

    def __repr__(self) -> str:
        return f"SpacesConfig(region={self.region!r}, bucket={self.bucket!r}, auth_key=***)"


@dataclass(frozen=True)
class SpacesOptions:
    """Backend options consumed when the client is built."""

    use_path_style: bool = False
    timeout: int = 300
    max_retries: int = 0


@dataclass
class ProviderConfig:
    """Configuration for a single storage provider."""

    name: str
    type: Literal["spaces", "local"]
    enabled: bool = True

    # Spaces-specific fields
    region: str | None = None
    bucket: str | None = None
    auth_key: str | None = None
    auth_secret: str | None = None
    use_path_style: bool = False

    # Local-specific fields
    base_path: str | None = None

    def validate(self) -> None:
        """Validate provider configuration."""
        if self.type == "spaces":
            if not all([self.region, self.bucket]):
                raise ConfigError(
                    f"Spaces provider '{self.name}' missing required fields: region, bucket"
                )
        elif self.type == "local":
            if not self.base_path:
                raise ConfigError(f"Local provider '{self.name}' missing required field: base_path")
        else:
            raise ConfigError(f"Provider '{self.name}' has unknown type: {self.type!r}")

    def spaces_config(self) -> SpacesConfig:
        return SpacesConfig(
            region=self.region or "",
            bucket=self.bucket or "",
            auth_key=self.auth_key or "",
            auth_secret=self.auth_secret or "",
        )

    def spaces_options(self) -> SpacesOptions:
        return SpacesOptions(use_path_style=self.use_path_style)
