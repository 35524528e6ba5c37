"""Server configuration sourced from the process environment.

Values are read when ``ServerConfig.from_env()`` is called, so a ``.env``
file loaded by the entry point (python-dotenv) is honored. CLI flags are
applied on top through ``ServerConfig.with_overrides``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Literal, Optional

Transport = Literal["stdio", "http", "sse"]

VALID_TRANSPORTS: tuple[str, ...] = ("stdio", "http", "sse")
DEFAULT_TRANSPORT: Transport = "stdio"
DEFAULT_PORT = 3001
DEFAULT_SERVER_NAME = "outlet-crm"


@dataclass
class ConfigValidationResult:
    """Result of configuration validation with success state and error details.

    Attributes:
        success: True if validation passed, False otherwise
        errors: List of error messages describing validation failures
    """

    success: bool
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.success

    def add_error(self, error: str) -> None:
        self.errors.append(error)
        self.success = False


def parse_transport(value: Optional[str]) -> Optional[Transport]:
    """Normalize a transport name; ``None`` for anything unrecognized."""
    if not value:
        return None
    normalized = value.strip().lower()
    # Accept the names used by other MCP tooling for the same bindings
    if normalized in ("streamable-http", "streamable_http"):
        normalized = "http"
    if normalized in VALID_TRANSPORTS:
        return normalized  # type: ignore[return-value]
    return None


def _parse_port(value: Optional[str]) -> int:
    if value is None or value == "":
        return DEFAULT_PORT
    try:
        return int(value)
    except ValueError:
        return -1


@dataclass(frozen=True)
class ServerConfig:
    """Runtime settings for the CRM MCP server."""

    supabase_url: str = ""
    supabase_service_key: str = field(default="", repr=False)
    transport: Transport = DEFAULT_TRANSPORT
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    server_name: str = DEFAULT_SERVER_NAME
    invalid_transport: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "ServerConfig":
        env = os.environ if environ is None else environ
        raw_transport = env.get("MCP_TRANSPORT")
        transport = parse_transport(raw_transport)
        return cls(
            supabase_url=env.get("SUPABASE_URL", "").strip(),
            supabase_service_key=env.get("SUPABASE_SERVICE_KEY", "").strip(),
            transport=transport or DEFAULT_TRANSPORT,
            host=env.get("HOST", "0.0.0.0"),
            port=_parse_port(env.get("PORT")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            server_name=env.get("MCP_SERVER_NAME", DEFAULT_SERVER_NAME),
            invalid_transport=raw_transport if raw_transport and transport is None else None,
        )

    def with_overrides(
        self,
        transport: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        log_level: Optional[str] = None,
    ) -> "ServerConfig":
        """Apply CLI overrides; ``None`` keeps the environment value."""
        changes: Dict[str, Any] = {}
        if transport is not None:
            parsed = parse_transport(transport)
            changes["transport"] = parsed or DEFAULT_TRANSPORT
            changes["invalid_transport"] = None if parsed else transport
        if host is not None:
            changes["host"] = host
        if port is not None:
            changes["port"] = port
        if log_level is not None:
            changes["log_level"] = log_level.upper()
        return replace(self, **changes)

    def validate(self) -> ConfigValidationResult:
        result = ConfigValidationResult(success=True)
        if not self.supabase_url:
            result.add_error("SUPABASE_URL is not set")
        elif not self.supabase_url.startswith(("http://", "https://")):
            result.add_error(f"SUPABASE_URL must be an http(s) URL: {self.supabase_url}")
        if not self.supabase_service_key:
            result.add_error("SUPABASE_SERVICE_KEY is not set")
        if self.transport != "stdio" and not 1 <= self.port <= 65535:
            result.add_error(f"PORT must be between 1 and 65535, got {self.port}")
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view for logging; the credential is masked."""
        return {
            "supabase_url": self.supabase_url,
            "supabase_service_key": _mask(self.supabase_service_key),
            "transport": self.transport,
            "host": self.host,
            "port": self.port,
            "log_level": self.log_level,
            "server_name": self.server_name,
        }


def _mask(secret: str) -> str:
    if not secret:
        return ""
    return f"{secret[:4]}…" if len(secret) > 8 else "***"
