"""Profile configuration for S3Hero.

Profiles are stored as JSON in ``~/.s3hero/config.json``. The directory is
created with mode 0700 and the file is written with mode 0600 because it
holds secret keys.

Environment Variables:
    S3HERO_CONFIG_DIR   Use another configuration directory
    S3HERO_PROFILE      Profile to use when none is given explicitly

Example file:
    {
      "default_profile": "r2",
      "profiles": {
        "r2": {
          "name": "r2",
          "provider": "cloudflare",
          "access_key_id": "xxx",
          "secret_access_key": "xxx",
          "region": "auto",
          "account_id": "0123456789abcdef"
        }
      }
    }
"""

import json
import os
from pathlib import Path
from typing import Optional

import s3hero.logging
from s3hero.models import Config, Profile, ProviderType

CONFIG_DIR_ENV = "S3HERO_CONFIG_DIR"
PROFILE_ENV = "S3HERO_PROFILE"
CONFIG_FILE_NAME = "config.json"


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if needed.

    Returns:
        ``$S3HERO_CONFIG_DIR`` when set, otherwise ``~/.s3hero``.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    config_dir = Path(override) if override else Path.home() / ".s3hero"
    config_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    return config_dir


def validate_profile(profile: Profile) -> None:
    """Check that a profile carries what its provider needs.

    Raises:
        ConfigError: If the profile is incomplete.
    """
    if not profile.name:
        raise ConfigError("profile name is required")

    if not profile.access_key_id or not profile.secret_access_key:
        raise ConfigError(
            f"profile '{profile.name}' requires an access key id and secret access key"
        )

    if profile.provider == ProviderType.CLOUDFLARE:
        if not profile.account_id and not profile.endpoint:
            raise ConfigError(
                f"cloudflare profile '{profile.name}' requires an account id or endpoint"
            )
    elif profile.provider == ProviderType.CUSTOM:
        if not profile.endpoint:
            raise ConfigError(f"custom profile '{profile.name}' requires an endpoint")


class ConfigManager:
    """Handles loading, editing and saving S3Hero profiles."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize the manager and load any existing configuration.

        Args:
            config_dir: Directory holding config.json (defaults to
                       get_config_dir())

        Raises:
            ConfigError: If an existing config file cannot be parsed.
        """
        if config_dir is None:
            config_dir = get_config_dir()
        else:
            config_dir.mkdir(mode=0o700, parents=True, exist_ok=True)

        self.config_path = config_dir / CONFIG_FILE_NAME
        self.config = Config()

        if self.config_path.exists():
            self.load()

    def load(self) -> None:
        """Read the configuration from disk.

        Raises:
            ConfigError: If the file contains invalid JSON or profiles.
        """
        try:
            with open(self.config_path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a JSON object")

        raw_profiles = data.get("profiles") or {}
        if not isinstance(raw_profiles, dict):
            raise ConfigError("'profiles' must be a JSON object")

        default_profile = data.get("default_profile") or ""
        if not isinstance(default_profile, str):
            raise ConfigError("'default_profile' must be a string")

        profiles: dict[str, Profile] = {}
        for name, raw in raw_profiles.items():
            if not isinstance(raw, dict):
                raise ConfigError(f"Invalid profile '{name}': expected a JSON object")
            try:
                profiles[name] = Profile.from_dict({"name": name, **raw})
            except KeyError as e:
                raise ConfigError(
                    f"Missing required field {e} for profile '{name}'"
                ) from e
            except ValueError as e:
                raise ConfigError(f"Invalid profile '{name}': {e}") from e

        self.config = Config(
            default_profile=default_profile,
            profiles=profiles,
        )
        s3hero.logging.debug("Loaded %d profile(s) from %s", len(profiles), self.config_path)

    def save(self) -> None:
        """Write the configuration to disk with owner-only permissions."""
        data = json.dumps(self.config.to_dict(), indent=2)
        fd = os.open(self.config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.chmod(self.config_path, 0o600)
        s3hero.logging.debug("Saved configuration to %s", self.config_path)

    def add_profile(self, profile: Profile) -> None:
        """Add or replace a profile and save.

        The first profile added becomes the default.
        """
        validate_profile(profile)

        self.config.profiles[profile.name] = profile

        if len(self.config.profiles) == 1:
            self.config.default_profile = profile.name

        self.save()

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """Look up a profile by name.

        Args:
            name: Profile name; falls back to $S3HERO_PROFILE and then to
                  the default profile when empty.

        Raises:
            ConfigError: If no profile can be selected or it does not exist.
        """
        if not name:
            name = os.environ.get(PROFILE_ENV) or self.config.default_profile

        if not name:
            raise ConfigError("no profile specified and no default profile set")

        profile = self.config.profiles.get(name)
        if profile is None:
            raise ConfigError(f"profile '{name}' not found")

        return profile

    def delete_profile(self, name: str) -> None:
        """Remove a profile and save.

        When the default profile is removed, the first remaining profile
        (by name) becomes the default.
        """
        if name not in self.config.profiles:
            raise ConfigError(f"profile '{name}' not found")

        del self.config.profiles[name]

        if self.config.default_profile == name:
            remaining = self.list_profiles()
            self.config.default_profile = remaining[0] if remaining else ""

        self.save()

    def list_profiles(self) -> list[str]:
        """Return all profile names, sorted."""
        return sorted(self.config.profiles)

    def set_default(self, name: str) -> None:
        if name not in self.config.profiles:
            raise ConfigError(f"profile '{name}' not found")

        self.config.default_profile = name
        self.save()

    def get_default(self) -> str:
        return self.config.default_profile
