"""Configuration: module defaults, an optional kb-lint.yaml, then CLI flags."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .issues import RULES, ConfigError

# --- CONFIG ---
CONFIG_FILENAME = "kb-lint.yaml"
CONFIG_ENV = "KB_LINT_CONFIG"

DEFAULT_DOCS_DIR = "docs"
DEFAULT_REQUIRED_FRONTMATTER = ["title", "description"]
DEFAULT_MAX_DESCRIPTION_LENGTH = 160
DEFAULT_HUB_MIN_LINKS = 3
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

# Highlighter languages the site accepts on a fence without complaint
KNOWN_LANGUAGES = {
    "java", "kotlin", "scala", "groovy", "python", "py", "javascript", "js",
    "typescript", "ts", "jsx", "tsx", "vue", "go", "rust", "c", "cpp", "c++",
    "csharp", "cs", "ruby", "php", "swift", "sql", "plsql", "graphql",
    "bash", "sh", "shell", "zsh", "console", "powershell", "ps1",
    "json", "jsonc", "yaml", "yml", "toml", "ini", "properties", "xml",
    "html", "css", "scss", "markdown", "md", "mermaid", "plantuml",
    "dockerfile", "docker", "makefile", "http", "diff", "proto", "protobuf",
    "text", "txt", "plaintext", "plain", "ascii", "csv", "log",
}

LEVELS = {"error", "warning", "off"}


@dataclass
class ExternalConfig:
    enabled: bool = False
    timeout: float = 10.0
    workers: int = 20
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class Config:
    docs_dir: Path = Path(DEFAULT_DOCS_DIR)
    ignore: list[str] = field(default_factory=list)
    ignore_links: list[str] = field(default_factory=list)
    required_frontmatter: list[str] = field(default_factory=lambda: list(DEFAULT_REQUIRED_FRONTMATTER))
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH
    languages: set[str] = field(default_factory=lambda: set(KNOWN_LANGUAGES))
    public_dir: str = "public"
    entry_pages: list[str] = field(default_factory=lambda: ["index.md"])
    hub_min_links: int = DEFAULT_HUB_MIN_LINKS
    rules: dict[str, str] = field(default_factory=dict)
    external: ExternalConfig = field(default_factory=ExternalConfig)


def _expect(value, kind, key: str):
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        names = kind.__name__ if isinstance(kind, type) else "/".join(k.__name__ for k in kind)
        raise ConfigError(f"'{key}' should be {names}, got {type(value).__name__}")
    return value


def _string_list(value, key: str) -> list[str]:
    _expect(value, list, key)
    for item in value:
        _expect(item, str, key)
    return list(value)


def _rules(value) -> dict[str, str]:
    _expect(value, dict, "rules")
    rules = {}
    for rule, level in value.items():
        # YAML reads a bare `off` as false
        if level is False:
            level = "off"
        if rule not in RULES:
            raise ConfigError(f"Unknown rule in 'rules': {rule}")
        if level not in LEVELS:
            raise ConfigError(f"Rule {rule}: level must be one of {sorted(LEVELS)}, got {level!r}")
        rules[rule] = level
    return rules


def _external(value) -> ExternalConfig:
    _expect(value, dict, "external")
    ext = ExternalConfig()
    for key, val in value.items():
        if key == "enabled":
            ext.enabled = _expect(val, bool, "external.enabled")
        elif key == "timeout":
            ext.timeout = float(_expect(val, (int, float), "external.timeout"))
        elif key == "workers":
            ext.workers = _expect(val, int, "external.workers")
            if ext.workers < 1:
                raise ConfigError("'external.workers' must be >= 1")
        elif key == "user_agent":
            ext.user_agent = _expect(val, str, "external.user_agent")
        else:
            raise ConfigError(f"Unknown key 'external.{key}'")
    return ext


def config_from_dict(data: dict, base_dir: Path | None = None) -> Config:
    """Build a Config from a parsed kb-lint.yaml mapping."""
    config = Config()
    base_dir = base_dir or Path.cwd()

    for key, value in data.items():
        if key == "docs_dir":
            config.docs_dir = base_dir / _expect(value, str, key)
        elif key in ("ignore", "ignore_links", "required_frontmatter", "entry_pages"):
            setattr(config, key, _string_list(value, key))
        elif key in ("max_description_length", "hub_min_links"):
            setattr(config, key, _expect(value, int, key))
        elif key == "languages":
            config.languages |= {lang.lower() for lang in _string_list(value, key)}
        elif key == "public_dir":
            config.public_dir = _expect(value, str, key)
        elif key == "rules":
            config.rules = _rules(value)
        elif key == "external":
            config.external = _external(value)
        else:
            raise ConfigError(f"Unknown config key: {key}")

    return config


def find_config_file(explicit: str | None = None) -> Path | None:
    """--config wins, then $KB_LINT_CONFIG, then ./kb-lint.yaml if present."""
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        return path
    env_path = os.getenv(CONFIG_ENV)
    if env_path:
        path = Path(env_path)
        if not path.exists():
            raise ConfigError(f"{CONFIG_ENV} points to a missing file: {path}")
        return path
    default = Path.cwd() / CONFIG_FILENAME
    return default if default.exists() else None


def load_config(path: Path | None) -> Config:
    if path is None:
        return Config()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e
    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return config_from_dict(data, base_dir=path.resolve().parent)
