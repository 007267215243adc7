"""Centralized logging configuration for the data provider.

The library itself only creates module loggers; applications embedding it
call configure_logging() once at startup if they want our format.

Logging Levels:
- DEBUG: Per-entity writes, ID collisions, reconstruction counts
- WARNING: Store failures, corrupt records, ambiguous parents, duplicate keys
- ERROR: Identifier allocation exhausted
"""

import logging
import os
import re
from dataclasses import dataclass, field

# Default patterns for secret detection and redaction
DEFAULT_REDACT_PATTERNS: list[str] = [
    # Passwords embedded in redis:// and rediss:// URLs
    r"\brediss?://[^:/@\s]*:([^@\s]+)@",
    # ENV-style assignments: REDIS_PASSWORD=secret or TOKEN: secret
    r"\b[A-Z0-9_]+(?:TOKEN|SECRET|PASSWORD|PASSWD)\s*[=:]\s*([^\s\"']{8,})",
    # Lightning payment preimages (32 bytes hex)
    r"\bpre_?image[\"']?\s*[=:]\s*[\"']?([0-9a-fA-F]{64})\b",
]


@dataclass
class SecretRedactor:
    """Redacts sensitive information from log messages.

    Matches are replaced with partially masked versions for debuggability.
    """

    patterns: list[re.Pattern[str]] = field(default_factory=list)
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.patterns:
            self.patterns = [
                re.compile(p, re.IGNORECASE) for p in DEFAULT_REDACT_PATTERNS
            ]

    def redact(self, text: str) -> str:
        """Redact secrets from text, preserving partial info for debugging."""
        if not self.enabled or not text:
            return text
        result = text
        for pattern in self.patterns:
            result = pattern.sub(self._mask_match, result)
        return result

    def _mask_match(self, match: re.Match[str]) -> str:
        full = match.group(0)
        token = match.group(1) if match.lastindex else full

        # Already masked
        if "..." in token:
            return full

        if len(token) < 12:
            return full.replace(token, "***") if token != full else "***"

        masked = f"{token[:4]}...{token[-4:]}"
        return full.replace(token, masked) if token != full else masked


# Module-level redactor instance
_redactor = SecretRedactor()


def configure_redaction(
    enabled: bool = True, extra_patterns: list[str] | None = None
) -> None:
    """Configure secret redaction for log messages.

    Args:
        enabled: Whether to enable redaction.
        extra_patterns: Additional regex patterns to match secrets.
    """
    global _redactor
    patterns = [re.compile(p, re.IGNORECASE) for p in DEFAULT_REDACT_PATTERNS]
    if extra_patterns:
        patterns.extend(re.compile(p, re.IGNORECASE) for p in extra_patterns)
    _redactor = SecretRedactor(patterns=patterns, enabled=enabled)


class ComponentFormatter(logging.Formatter):
    """Formatter that extracts a component name and redacts secrets.

    Converts full module paths to short component names:
    - lightauth_redis.graph.reader -> graph
    - lightauth_redis.store.redis_store -> store
    - lightauth_redis.allocator -> allocator
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = record.name.split(".")
        if len(parts) >= 2 and parts[0] == "lightauth_redis":
            record.component = parts[1]
        else:
            record.component = parts[0]
        return _redactor.redact(super().format(record))


# Third-party loggers that are too noisy at DEBUG level
NOISY_LOGGERS = [
    "redis",
    "asyncio",
]


def configure_logging(level: str | None = None, use_rich: bool = False) -> None:
    """Configure logging for applications embedding the data provider.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses LIGHTAUTH_LOG_LEVEL env var or INFO.
        use_rich: Use Rich handler for colorful console output.
    """
    if level is None:
        level = os.environ.get("LIGHTAUTH_LOG_LEVEL", "INFO").upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            level = "INFO"

    log_level = getattr(logging, level)

    if use_rich:
        from rich.logging import RichHandler

        console_handler: logging.Handler = RichHandler(
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        console_handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(
        level=log_level,
        handlers=[console_handler],
        force=True,
    )

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
