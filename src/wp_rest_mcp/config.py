"""Configuration management for the WordPress MCP bridge"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigInvalid, ConfigLoadFailed
from .models.site import RawSiteEntry, SiteConfig
from .services.synthesis import MAX_SITE_PREFIX_LENGTH, site_prefix

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Site map, inline JSON or a file path (the path wins)
    wp_sites: str | None = None
    wp_sites_path: str | None = None

    # HTTP client
    request_timeout: float = 30.0

    # Server settings
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


def _read_config_string(settings: Settings) -> str:
    if settings.wp_sites_path:
        config_path = Path(settings.wp_sites_path).expanduser()
        try:
            return config_path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigLoadFailed(f"Config file not found at: {config_path}") from e
        except OSError as e:
            raise ConfigLoadFailed(f"Failed to load config: {e}") from e

    if not settings.wp_sites:
        raise ConfigLoadFailed(
            "One of WP_SITES_PATH or WP_SITES environment variable is required"
        )
    return settings.wp_sites


def parse_site_entry(alias: str, raw: object) -> SiteConfig:
    """Validate one site map entry, raising ConfigInvalid if it is unusable."""
    if not isinstance(raw, dict):
        raise ConfigInvalid(alias, "entry must be an object")
    try:
        entry = RawSiteEntry.model_validate(raw)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise ConfigInvalid(
            alias, f"missing or invalid fields ({', '.join(fields) or 'unknown'})"
        ) from e
    if len(site_prefix(alias.lower())) > MAX_SITE_PREFIX_LENGTH:
        raise ConfigInvalid(
            alias, f"alias longer than {MAX_SITE_PREFIX_LENGTH} characters"
        )
    return SiteConfig.from_entry(alias, entry)


def load_site_config(settings: Settings) -> dict[str, SiteConfig]:
    """Load and normalize the site map.

    Unreadable or malformed configuration raises ConfigLoadFailed. Entries
    missing URL, USER or PASS, and aliases whose tool-name prefix is too long
    or matches an earlier site, are logged and skipped.
    """
    config_string = _read_config_string(settings)
    try:
        config = json.loads(config_string)
    except json.JSONDecodeError as e:
        raise ConfigLoadFailed(f"Failed to load config: {e}") from e
    if not isinstance(config, dict):
        raise ConfigLoadFailed("Failed to load config: site map must be a JSON object")

    sites: dict[str, SiteConfig] = {}
    prefixes: dict[str, str] = {}
    for alias, raw in config.items():
        try:
            site = parse_site_entry(alias, raw)
        except ConfigInvalid as e:
            logger.error("%s", e)
            continue

        prefix = site_prefix(site.alias)
        owner = prefixes.get(prefix)
        if owner == site.alias:
            logger.warning("Duplicate site alias %s, keeping the last entry", site.alias)
        elif owner is not None:
            clash = ConfigInvalid(alias, f"tool names would clash with site {owner}")
            logger.error("%s", clash)
            continue
        prefixes[prefix] = site.alias
        sites[site.alias] = site

    return sites


# Global settings instance
settings = Settings()
