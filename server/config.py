"""Configuration for the API server, worker and CLI."""

import os
from dataclasses import dataclass


HISTORY_BACKENDS = ('local', 'cookie')


@dataclass
class Settings:
    """Environment-backed settings."""
    gemini_api_key: str = os.getenv('GEMINI_API_KEY', '')
    gemini_model: str = os.getenv('GEMINI_MODEL', 'gemini-1.5-flash-latest')
    gemini_base_url: str = os.getenv(
        'GEMINI_BASE_URL', 'https://generativelanguage.googleapis.com/v1beta/models'
    )
    api_timeout_seconds: float = float(os.getenv('API_TIMEOUT_SECONDS', '30'))
    api_retry_attempts: int = int(os.getenv('API_RETRY_ATTEMPTS', '3'))
    session_secret: str = os.getenv('SESSION_SECRET', 'change-me')
    redis_url: str = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    history_backend: str = os.getenv('HISTORY_BACKEND', 'local')
    history_db_path: str = os.getenv('HISTORY_DB_PATH', '')
    # Encoded session cookie body, leaving room under the 4096 byte browser limit
    cookie_max_bytes: int = int(os.getenv('COOKIE_MAX_BYTES', '4000'))
    host: str = os.getenv('HOST', '127.0.0.1')
    port: int = int(os.getenv('PORT', '8000'))
    log_level: str = os.getenv('LOG_LEVEL', 'INFO')


def validate_settings(s: Settings) -> list:
    """Problems with the given settings, empty when usable."""
    problems = []
    if s.history_backend not in HISTORY_BACKENDS:
        problems.append(
            f'HISTORY_BACKEND must be one of {", ".join(HISTORY_BACKENDS)}, '
            f'got {s.history_backend!r}'
        )
    if s.session_secret == 'change-me':
        problems.append('SESSION_SECRET is using the default value')
    if s.api_timeout_seconds <= 0:
        problems.append('API_TIMEOUT_SECONDS must be positive')
    if s.api_retry_attempts < 1:
        problems.append('API_RETRY_ATTEMPTS must be at least 1')
    if s.cookie_max_bytes < 1:
        problems.append('COOKIE_MAX_BYTES must be positive')
    return problems


settings = Settings()


def make_client(s: Settings = None):
    """Gemini client for the configured key, or None to use heuristics."""
    from idea_scanner import ClientConfig, GeminiClient

    s = s or settings
    if not s.gemini_api_key:
        return None
    return GeminiClient(ClientConfig(
        api_key=s.gemini_api_key,
        base_url=s.gemini_base_url,
        model=s.gemini_model,
        timeout_seconds=s.api_timeout_seconds,
        retry_attempts=s.api_retry_attempts,
    ))
