"""Tests for placeholder substitution in page templates."""

from api.services.template_renderer import post_fields, render, render_tags


class TestRender:
    """Tests for render()."""

    def test_replaces_every_occurrence(self):
        html = render("<title>{{title}}</title><h1>{{title}}</h1>", {"title": "Hi"})
        assert html == "<title>Hi</title><h1>Hi</h1>"

    def test_unknown_markers_left_untouched(self):
        html = render("{{title}} {{comments}}", {"title": "Hi"})
        assert html == "Hi {{comments}}"

    def test_markers_without_fields_left_untouched(self):
        assert render("{{author}}", {}) == "{{author}}"

    def test_inserted_values_are_not_rescanned(self):
        """A value containing a marker is inserted literally."""
        html = render(
            "{{content}}|{{title}}",
            {"content": "Use {{title}} in templates", "title": "Docs"},
        )
        assert html == "Use {{title}} in templates|Docs"

    def test_template_without_markers_unchanged(self):
        assert render("<p>static</p>", {"title": "x"}) == "<p>static</p>"


class TestRenderTags:
    """Tests for render_tags()."""

    def test_spans_joined_by_space(self):
        assert render_tags(["python", "web"]) == (
            '<span class="tag">python</span> <span class="tag">web</span>'
        )

    def test_empty(self):
        assert render_tags([]) == ""

    def test_escapes_html(self):
        assert render_tags(["<b>"]) == '<span class="tag">&lt;b&gt;</span>'


class TestPostFields:
    """Tests for post_fields()."""

    def test_all_placeholders_present(self, make_post):
        fields = post_fields(make_post(), "<p>x</p>")
        assert set(fields) == {
            "title",
            "description",
            "date",
            "author",
            "cover",
            "thumbnail",
            "content",
            "url",
            "tags",
        }

    def test_values(self, make_post):
        post = make_post(
            "tips",
            title="Tips & Tricks",
            tags=["a", "b"],
            thumbnail="/images/blog/t.jpg",
        )
        fields = post_fields(post, "<h1>Hi</h1>")

        assert fields["title"] == "Tips &amp; Tricks"
        assert fields["date"] == "2026-03-01"
        assert fields["content"] == "<h1>Hi</h1>"
        assert fields["url"] == "/blog/posts/tips.html"
        assert fields["cover"] == "/images/blog/default.jpg"
        assert fields["thumbnail"] == "/images/blog/t.jpg"
        assert fields["tags"] == render_tags(["a", "b"])
