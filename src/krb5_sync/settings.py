"""
krb5_sync.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the tool and its backend.
- Hide secrets from repr/logging (e.g., the AD bind password).
- Offer a cached settings instance for the process entry point.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Every knob is read from `KRB5_SYNC_*` environment variables.
    Defaults are safe for a workstation run against a test directory.
    """

    model_config = SettingsConfigDict(env_prefix="KRB5_SYNC_", case_sensitive=False)

    program_name: str = "krb5-sync"
    log_level: str = "INFO"
    log_json: bool = False

    # Actions go to LOG_AUTH so they sit next to the admin daemon's own entries.
    syslog: bool = False
    syslog_address: str = "/dev/log"

    # Queue files
    queue_line_limit: int = Field(default=8192, gt=1)

    # Backend diagnostics longer than this are cut off.
    message_limit: int = Field(default=8192, gt=0)

    # Kerberos
    default_realm: str | None = None

    # Active Directory
    ad_ldap_host: str = "localhost"
    ad_ldap_port: int = 636
    ad_use_ssl: bool = True
    ad_ldap_base: str = ""
    # Unset means a SASL/Kerberos bind, which needs the `kerberos` extra (gssapi).
    ad_bind_dn: str | None = None
    ad_bind_password: str | None = Field(default=None, repr=False)
    ad_base_instance: str | None = None
    ad_timeout: int = 30


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Settings are loaded once by `krb5_sync.cli.main` and handed down explicitly;
# lower layers never read the environment themselves.
