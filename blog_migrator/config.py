"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- InputConfig: Export and authority source locations
- LinksConfig: Legacy link matching and rewriting
- OutputConfig: Output directory and document settings
- LoggingConfig: Logging behavior
- FetchConfig: Content API settings for the likes report
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from pathlib import Path
from typing import Any

import yaml

from .core.links import DEFAULT_HOST_PREFIX, DEFAULT_LINK_TEMPLATE, DEFAULT_TOKEN_PATTERN


@dataclass
class InputConfig:
    """Configuration for input sources.

    Attributes:
        export_path: Path to the entity export (XML)
        authority_path: Path to the authority source (colon-separated lines)
        encoding: Text encoding of the authority source
    """

    export_path: str | None = None
    authority_path: str | None = None
    encoding: str = "utf-8"


@dataclass
class LinksConfig:
    """Configuration for legacy link rewriting.

    Attributes:
        host_prefix: Literal URL prefix preceding the legacy link token
        token_pattern: Regex for the token itself
        template: Replacement link, ``{date}`` receives YYYY-MM-DD
        legacy_parity: Stop rewriting a body at its first unresolved link
    """

    host_prefix: str = DEFAULT_HOST_PREFIX
    token_pattern: str = DEFAULT_TOKEN_PATTERN
    template: str = DEFAULT_LINK_TEMPLATE
    legacy_parity: bool = False


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        directory: Output directory, deleted and recreated on every run
        extension: File extension of written documents
        draft: Value of the ``draft`` front matter field
    """

    directory: str = "posts"
    extension: str = ".html"
    draft: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file, written next to the output directory
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "migration.jsonl"


@dataclass
class FetchConfig:
    """Configuration for the content API used by the likes report.

    Attributes:
        base_url: Root URL of the content API host
        space_key: Space whose blog posts are listed
        token_path: File holding the bearer token
        token_env: Environment variable that can supply the token instead
        page_limit: Page size requested from the listing endpoint
        timeout_seconds: HTTP request timeout
        trust_env: Whether to respect system proxy settings
    """

    base_url: str = "https://confluence.example.com/"
    space_key: str | None = None
    token_path: str = "~/.jira/blogtoken"
    token_env: str = "BLOG_MIGRATOR_TOKEN"
    page_limit: int = 25
    timeout_seconds: float = 20.0
    trust_env: bool = True


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    input: InputConfig = field(default_factory=InputConfig)
    links: LinksConfig = field(default_factory=LinksConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        input=InputConfig(**data["input"]),
        links=LinksConfig(**data["links"]),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
        fetch=FetchConfig(**data["fetch"]),
    )


def get_api_token(cfg: FetchConfig) -> str:
    """Get the API token from the environment or the token file.

    The file is read whole and a single trailing newline is dropped.

    Raises:
        OSError: If no environment value is set and the file cannot be read
    """
    token = os.getenv(cfg.token_env)
    if token:
        return token
    path = Path(cfg.token_path).expanduser()
    with open(path, encoding="utf-8") as fh:
        return fh.read().rstrip("\r\n")
