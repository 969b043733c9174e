"""Application configuration via environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3333",
        "https://on-track.in",
    ]

    # Generated site (static files served by the host)
    site_root: Path = Path("public")
    site_url: str = "https://on-track.in"

    # Post defaults
    default_author: str = "Ontrack Team"
    default_cover: str = "/images/blog/default.jpg"

    # Uploads
    max_upload_bytes: int = 10 * 1024 * 1024

    # Git publish + hosting deploy (off unless explicitly enabled)
    publish_enabled: bool = False
    git_repo_path: str = ""  # defaults to the parent of site_root
    git_remote: str = "origin"
    git_branch: str = ""  # empty = push the current branch
    deploy_hook_url: str = ""  # e.g. a Netlify/Vercel build hook
    deploy_command: str = ""  # used only when no deploy hook is set

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def blog_index_path(self) -> Path:
        return self.site_root / "blog" / "data" / "blogs.json"

    @property
    def posts_dir(self) -> Path:
        return self.site_root / "blog" / "posts"

    @property
    def templates_dir(self) -> Path:
        return self.site_root / "blog" / "templates"

    @property
    def images_dir(self) -> Path:
        return self.site_root / "images" / "blog"

    @property
    def sitemap_path(self) -> Path:
        return self.site_root / "sitemap.xml"

    @property
    def repo_path(self) -> Path:
        if self.git_repo_path:
            return Path(self.git_repo_path)
        return self.site_root.resolve().parent


@lru_cache
def get_settings() -> Settings:
    return Settings()
