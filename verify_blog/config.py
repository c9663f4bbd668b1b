"""
Runtime configuration, read from the environment (and a .env file if present).

Required:
  ANTHROPIC_API_KEY   Anthropic API key

Optional:
  ANTHROPIC_MODEL     Model id (default: claude-sonnet-4-5-20250929)
  BLOG_ROOT           Directory holding index.html, sitemap.xml and data/ (default: cwd)
  SITE_URL            Public blog URL (default: https://blog.verify24.pl)
  MAIN_URL            Main product site (default: https://verify24.pl)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_SITE_URL = "https://blog.verify24.pl"
DEFAULT_MAIN_URL = "https://verify24.pl"


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str
    root: Path
    site_url: str
    main_url: str

    @property
    def topics_path(self) -> Path:
        return topics_path_for(self.root)


def topics_path_for(root: Path) -> Path:
    return root / "data" / "topics.json"


def resolve_root(env: Mapping[str, str]) -> Path:
    return Path(env.get("BLOG_ROOT") or os.getcwd()).resolve()


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``env`` (defaults to os.environ after loading .env)."""
    if env is None:
        load_dotenv()
        env = os.environ

    api_key = (env.get("ANTHROPIC_API_KEY") or "").strip()
    if not api_key:
        raise ConfigError("ANTHROPIC_API_KEY environment variable is required")

    return Settings(
        api_key=api_key,
        model=env.get("ANTHROPIC_MODEL") or DEFAULT_MODEL,
        root=resolve_root(env),
        site_url=(env.get("SITE_URL") or DEFAULT_SITE_URL).rstrip("/"),
        main_url=(env.get("MAIN_URL") or DEFAULT_MAIN_URL).rstrip("/"),
    )
