"""Configuration for the git-editor API."""
import os
from dataclasses import dataclass, field

from .. import __version__

DEFAULT_GITHUB_API_URL = 'https://api.github.com'
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 30.0
DEFAULT_SESSION_MAX_AGE_SECONDS = 24 * 60 * 60
DEFAULT_SESSION_SWEEP_INTERVAL_SECONDS = 300.0


class ConfigValidationError(ValueError):
    """Raised when APIConfig fails startup validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            'Startup validation failed:\n' + '\n'.join(f'  - {e}' for e in errors)
        )


def _default_cors_origins() -> list[str]:
    """Get default CORS origins, supporting env override."""
    env_origins = os.environ.get('CORS_ORIGINS', '')
    if env_origins:
        return [o.strip() for o in env_origins.split(',') if o.strip()]
    # Default: common dev origins
    return [
        'http://localhost:3000',
        'http://localhost:5173',
        'http://127.0.0.1:3000',
        'http://127.0.0.1:5173',
    ]


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Invalid {name}='{raw}': expected a number")


@dataclass
class APIConfig:
    """Central configuration for all API routers.

    This dataclass is passed to create_app() and every router factory,
    enabling dependency injection and avoiding global state.
    """

    # Hosting provider REST API root
    github_api_url: str = field(
        default_factory=lambda: os.environ.get('GITHUB_API_URL', DEFAULT_GITHUB_API_URL)
    )

    # Bound applied to every single upstream call
    upstream_timeout_seconds: float = field(
        default_factory=lambda: _env_float(
            'UPSTREAM_TIMEOUT_SECONDS', DEFAULT_UPSTREAM_TIMEOUT_SECONDS,
        )
    )

    # Sliding expiry: sessions idle longer than this are evicted
    session_max_age_seconds: float = field(
        default_factory=lambda: _env_float(
            'SESSION_MAX_AGE_SECONDS', DEFAULT_SESSION_MAX_AGE_SECONDS,
        )
    )
    session_sweep_interval_seconds: float = field(
        default_factory=lambda: _env_float(
            'SESSION_SWEEP_INTERVAL_SECONDS', DEFAULT_SESSION_SWEEP_INTERVAL_SECONDS,
        )
    )

    cors_origins: list[str] = field(default_factory=_default_cors_origins)

    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            'GIT_EDITOR_USER_AGENT', f'git-editor/{__version__}',
        )
    )

    # Prefix under which the proxy routers are mounted ('' mounts at root)
    api_prefix: str = field(default_factory=lambda: os.environ.get('API_PREFIX', '/api'))

    def validate_startup(self) -> None:
        """Validate configuration at startup.

        Collects every problem before raising so the operator sees the
        whole list at once.

        Raises:
            ConfigValidationError: If any setting is invalid
        """
        errors: list[str] = []

        if not self.github_api_url.startswith(('http://', 'https://')):
            errors.append(
                f"github_api_url must be an http(s) URL, got '{self.github_api_url}'"
            )
        if self.upstream_timeout_seconds <= 0:
            errors.append('upstream_timeout_seconds must be > 0')
        if self.session_max_age_seconds <= 0:
            errors.append('session_max_age_seconds must be > 0')
        if self.session_sweep_interval_seconds <= 0:
            errors.append('session_sweep_interval_seconds must be > 0')
        if self.api_prefix and (
            not self.api_prefix.startswith('/') or self.api_prefix.endswith('/')
        ):
            errors.append(
                f"api_prefix must start with '/' and not end with '/', got '{self.api_prefix}'"
            )

        if errors:
            raise ConfigValidationError(errors)
