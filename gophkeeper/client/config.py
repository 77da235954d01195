"""GophKeeper client configuration.

Values come from environment variables prefixed with ``GOPHKEEPER_CLIENT_``
or from a local ``.env`` file.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gophkeeper.core.config import normalize_log_level


class ClientSettings(BaseSettings):
    """Client settings."""

    model_config = SettingsConfigDict(
        env_prefix="GOPHKEEPER_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server address as host:port
    server_address: str = "127.0.0.1:8443"

    # Logging
    log_level: str = "WARNING"

    # TLS: the client presents the same certificate the server trusts
    certs_dir: Path = Path(".cert")
    tls_cert_file: str = "public.pem"
    tls_key_file: str = "private.pem"
    tls_ca_file: str | None = None

    # Origin address sent at login; the server uses the peer address when empty
    machine_ip: str = ""

    # HTTP
    request_timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=2, ge=0)
    retry_base_delay: float = Field(default=0.5, ge=0)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return normalize_log_level(v)

    @property
    def base_url(self) -> str:
        return f"https://{self.server_address}"

    @property
    def tls_cert_path(self) -> Path:
        return self.certs_dir / self.tls_cert_file

    @property
    def tls_key_path(self) -> Path:
        return self.certs_dir / self.tls_key_file

    @property
    def tls_ca_path(self) -> Path:
        if self.tls_ca_file:
            return self.certs_dir / self.tls_ca_file
        return self.tls_cert_path
