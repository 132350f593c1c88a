"""
Settings for oneio.

Loaded from environment variables each time they are needed, so tests and
long-running processes always observe the current environment.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

__all__ = ["Settings", "create_settings_from_env", "str_to_bool"]

TRUTHY = ("true", "yes", "y", "1")


def str_to_bool(value: Optional[str]) -> bool:
    """Interpret boolean-like environment values."""
    return (value or "").strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    """
    Configuration consumed by the transport collaborators.

    HTTP Settings:
        accept_invalid_certs: Skip TLS certificate validation
        user_agent: User-Agent header sent with every request
        http_timeout_s: Timeout for GET/HEAD requests
        exists_timeout_s: Timeout for existence probes

    Object Storage Settings:
        aws_access_key_id / aws_secret_access_key: Credentials
        aws_region: Region name ("auto" for R2)
        aws_endpoint: Custom endpoint for S3-compatible providers
        s3_timeout_s: Read timeout for object storage calls
    """
    accept_invalid_certs: bool = False
    user_agent: str = "oneio"
    http_timeout_s: float = 60.0
    exists_timeout_s: float = 2.0

    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: Optional[str] = None
    aws_endpoint: Optional[str] = None
    s3_timeout_s: float = 600.0

    def __post_init__(self):
        if self.http_timeout_s <= 0:
            raise ValueError(f"http_timeout_s must be positive, got {self.http_timeout_s}")
        if self.exists_timeout_s <= 0:
            raise ValueError(f"exists_timeout_s must be positive, got {self.exists_timeout_s}")
        if self.s3_timeout_s <= 0:
            raise ValueError(f"s3_timeout_s must be positive, got {self.s3_timeout_s}")

    @property
    def has_s3_credentials(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)


def create_settings_from_env() -> Settings:
    """
    Build settings from the environment.

    Environment Variables:
        - ONEIO_ACCEPT_INVALID_CERTS (default: false)
        - ONEIO_USER_AGENT (default: oneio)
        - ONEIO_HTTP_TIMEOUT (default: 60.0)
        - AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY (optional)
        - AWS_REGION (optional)
        - AWS_ENDPOINT or AWS_ENDPOINT_URL (optional)

    Raises:
        ValueError: If a numeric value cannot be parsed or is out of range
    """
    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        try:
            return float(value) if value else default
        except ValueError:
            raise ValueError(f"{key} must be a number, got {value!r}")

    return Settings(
        accept_invalid_certs=str_to_bool(os.getenv("ONEIO_ACCEPT_INVALID_CERTS")),
        user_agent=os.getenv("ONEIO_USER_AGENT") or "oneio",
        http_timeout_s=get_float("ONEIO_HTTP_TIMEOUT", 60.0),
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        aws_region=os.getenv("AWS_REGION"),
        aws_endpoint=os.getenv("AWS_ENDPOINT") or os.getenv("AWS_ENDPOINT_URL"),
    )
