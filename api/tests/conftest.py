"""Shared fixtures for blog publisher tests."""

import pytest

PRIMARY_TEMPLATE = (
    "<html><head><title>{{title}}</title>"
    '<meta name="description" content="{{description}}" /></head>'
    "<body><h1>{{title}}</h1>"
    '<p class="meta">{{date}} by {{author}}</p>'
    '<img class="cover" src="{{cover}}" />'
    '<img class="thumb" src="{{thumbnail}}" />'
    '<div class="tags">{{tags}}</div>'
    "<article>{{content}}</article>"
    '<a rel="canonical" href="{{url}}">permalink</a>'
    "{{comments}}</body></html>"
)
SECONDARY_TEMPLATE = '<main data-template="2"><h1>{{title}}</h1>{{content}}</main>'
TERTIARY_TEMPLATE = '<main data-template="3"><h1>{{title}}</h1>{{content}}</main>'


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from api.config import get_settings

    get_settings.cache_clear()

    # 2. Post index store singleton
    import api.services.post_index as index_mod

    index_mod._store = None

    # 3. Publish notifier singleton
    import api.services.publisher as publisher_mod

    publisher_mod._notifier = None

    # 4. HTTP client singleton
    import api.services.http_client as http_mod

    http_mod._client = None


@pytest.fixture
def site_root(tmp_path):
    """A site directory with the three page templates in place."""
    root = tmp_path / "public"
    templates = root / "blog" / "templates"
    templates.mkdir(parents=True)
    (templates / "blog-template.html").write_text(PRIMARY_TEMPLATE)
    (templates / "blog-template-2.html").write_text(SECONDARY_TEMPLATE)
    (templates / "blog-template-3.html").write_text(TERTIARY_TEMPLATE)
    return root


@pytest.fixture
def mock_settings(monkeypatch, site_root):
    """Provide a Settings object pointing at a temporary site root."""
    from api.config import Settings, get_settings

    test_settings = Settings(
        site_root=site_root,
        site_url="https://blog.test",
        default_author="Ontrack Team",
        default_cover="/images/blog/default.jpg",
        publish_enabled=False,
        git_repo_path=str(site_root.parent),
        deploy_hook_url="",
        deploy_command="",
    )

    get_settings.cache_clear()
    monkeypatch.setattr("api.config.get_settings", lambda: test_settings)

    # Patch get_settings in all modules that import it directly
    # (from api.config import get_settings creates a local binding that
    # the api.config monkeypatch above does not affect)
    for mod_path in [
        "api.services.site_storage",
        "api.services.post_index",
        "api.services.publisher",
        "api.services.publication",
        "api.routers.blog",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


@pytest.fixture
def store(mock_settings):
    """A post index store backed by the temporary site's blogs.json."""
    from api.services.post_index import PostIndexStore

    return PostIndexStore(mock_settings.blog_index_path)


@pytest.fixture
def make_post():
    """Factory for Post records with sensible defaults."""
    from datetime import date

    from api.models.blog import Post

    def _make(slug: str = "first-post", **overrides):
        fields = {
            "title": slug.replace("-", " ").title(),
            "slug": slug,
            "description": "A post",
            "author": "Ontrack Team",
            "date": date(2026, 3, 1),
            "url": f"/blog/posts/{slug}.html",
            "cover": "/images/blog/default.jpg",
        }
        fields.update(overrides)
        return Post(**fields)

    return _make
