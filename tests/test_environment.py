"""Test environment loading, caching, fallback and configuration."""

from __future__ import annotations

import gc
import logging

import pytest

from trellis import (
    DEFAULT_FALLBACK,
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    FunctionLoader,
    TemplateCache,
    TemplateNotFoundError,
)


class TestLoad:
    """Environment.load: cache in front of the loader."""

    def test_first_load_reads_once(self, counting_env, counting_loader):
        source = counting_env.load("home.html")
        assert counting_loader.reads == ["home.html"]
        again = counting_env.load("home.html")
        assert counting_loader.reads == ["home.html"]
        assert again == source

    def test_distinct_names_read_once_each(self, counting_env, counting_loader):
        for _ in range(3):
            counting_env.load("base.html")
            counting_env.load("child.html")
        assert sorted(counting_loader.reads) == ["base.html", "child.html"]

    def test_render_reads_base_once(self, counting_env, counting_loader):
        """Repeated renders of a child never re-read child or base."""
        for _ in range(5):
            counting_env.render("child.html")
        assert sorted(counting_loader.reads) == ["base.html", "child.html"]

    def test_missing_template_raises(self, env_with_loader):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            env_with_loader.load("nope.html")
        assert exc_info.value.name == "nope.html"
        assert exc_info.value.format_compact().startswith("T-TPL-001")

    def test_failed_load_not_cached(self, counting_env, counting_loader):
        """A failure is not remembered; the next request reads again."""
        for _ in range(2):
            with pytest.raises(TemplateNotFoundError):
                counting_env.load("nope.html")
        assert counting_loader.reads == ["nope.html", "nope.html"]
        assert "nope.html" not in counting_env.cache

    def test_no_loader(self, env):
        with pytest.raises(TemplateNotFoundError, match="no loader"):
            env.load("home.html")

    def test_shared_cache(self, explorer_templates):
        """Two environments sharing a cache share loaded sources."""
        cache = TemplateCache()
        first = Environment(loader=DictLoader(explorer_templates), cache=cache)
        first.load("base.html")
        second = Environment(loader=FunctionLoader(lambda name: None), cache=cache)
        assert second.load("base.html") == explorer_templates["base.html"]

    def test_cache_info(self, counting_env):
        counting_env.load("base.html")
        counting_env.load("base.html")
        assert counting_env.cache_info() == {"size": 1, "hits": 1, "misses": 1}


class TestRenderFallback:
    """Environment.render never raises TemplateError."""

    def test_missing_template(self, env_with_loader):
        assert env_with_loader.render("nope.html") == (
            "<h1>Template Error</h1><p>Could not render template: nope.html</p>"
        )

    def test_missing_base(self, env_with_loader):
        """A failed base load reports the template that was requested."""
        assert env_with_loader.render("orphan.html") == DEFAULT_FALLBACK.format(name="orphan.html")

    def test_missing_iterable(self, env_with_loader):
        result = env_with_loader.render("broken_loop.html")
        assert "Template Error" in result
        assert "broken_loop.html" in result

    def test_syntax_error(self):
        env = Environment(loader=DictLoader({"bad.html": "{% block a %}"}))
        assert env.render("bad.html") == DEFAULT_FALLBACK.format(name="bad.html")

    def test_custom_fallback(self):
        env = Environment(loader=DictLoader({}), fallback="<!-- {name} unavailable -->")
        assert env.render("x.html") == "<!-- x.html unavailable -->"

    def test_fallback_with_literal_braces(self):
        fallback = "<style>p { color: red }</style><p>{name} failed</p>"
        env = Environment(loader=DictLoader({}), fallback=fallback)
        assert env.render("x.html") == "<style>p { color: red }</style><p>x.html failed</p>"

    def test_function_loader_io_error(self, tmp_path):
        """An I/O error inside a loader function becomes the fallback."""
        missing = tmp_path / "nonexistent" / "home.html"
        env = Environment(loader=FunctionLoader(lambda name: missing.read_text()))
        assert env.render("home.html") == DEFAULT_FALLBACK.format(name="home.html")

    def test_custom_loader_io_error(self):
        """Read errors from any loader are reported as not found."""

        class BrokenLoader:
            def get_source(self, name):
                raise PermissionError(13, "Permission denied", name)

        env = Environment(loader=BrokenLoader())
        with pytest.raises(TemplateNotFoundError, match="could not be read") as exc_info:
            env.load("home.html")
        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert env.render("home.html") == DEFAULT_FALLBACK.format(name="home.html")

    def test_variables_named_like_parameters(self):
        env = Environment(loader=DictLoader({"g.html": "Hello, {{ name }} ({{ context }})!"}))
        assert env.render("g.html", name="World", context="x") == "Hello, World (x)!"
        assert env.render_direct("g.html", {"name": "A"}, context="y") == "Hello, A (y)!"

    def test_failure_is_logged(self, env_with_loader, caplog):
        with caplog.at_level(logging.ERROR, logger="trellis.environment.core"):
            env_with_loader.render("broken_loop.html")
        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.levelno == logging.ERROR
        assert "broken_loop.html" in record.getMessage()
        assert "T-RUN-002" in record.getMessage()

    def test_success(self, env_with_loader):
        result = env_with_loader.render(
            "htmx/network_info.html", {"height": 3129442, "hash_rate": "2.1 GH/s"}
        )
        assert result == "<dd>3129442</dd><dd>2.1 GH/s</dd>"

    def test_idempotent(self, env_with_loader):
        context = {"network": "stagenet", "blocks": [{"height": 7, "num_txes": 1}]}
        first = env_with_loader.render("home.html", context)
        second = env_with_loader.render("home.html", context)
        assert first == second
        assert "stagenet" in first


class TestRenderDirect:
    """render_direct: no inheritance resolution."""

    def test_extends_left_as_text(self, env_with_loader):
        assert env_with_loader.render_direct("child.html") == '{% extends "base.html" %}Hello World'

    def test_does_not_load_base(self, counting_env, counting_loader):
        counting_env.render_direct("child.html")
        assert counting_loader.reads == ["child.html"]

    def test_variables_interpolated(self, env_with_loader):
        assert env_with_loader.render_direct("htmx/network_info.html", height=1, hash_rate=2) == (
            "<dd>1</dd><dd>2</dd>"
        )

    def test_fallback(self, env_with_loader):
        assert env_with_loader.render_direct("nope.html") == DEFAULT_FALLBACK.format(
            name="nope.html"
        )


class TestTemplateObject:
    """get_template / from_string results."""

    def test_introspection(self, env_with_loader):
        tmpl = env_with_loader.get_template("home.html")
        assert tmpl.name == "home.html"
        assert tmpl.base_name == "base.html"
        assert tmpl.block_names() == ["title", "content"]
        assert tmpl.source.startswith('{% extends "base.html" %}')

    def test_from_string_not_cached(self, env):
        env.from_string("x", name="inline.html")
        assert len(env.cache) == 0

    def test_from_string_extends_uses_loader(self, env_with_loader):
        tmpl = env_with_loader.from_string('{% extends "base.html" %}{% block content %}hi{% endblock %}')
        assert tmpl.render().endswith("<body>hi</body></html>")

    def test_too_many_positional(self, env):
        with pytest.raises(TypeError):
            env.from_string("x").render({}, {})

    def test_template_outlives_environment_reference(self):
        tmpl = Environment().from_string("<{{ x }}>")
        gc.collect()
        assert tmpl.render(x=1) == "<1>"

    def test_named_template_outlives_environment_reference(self, explorer_templates):
        tmpl = Environment(loader=DictLoader(explorer_templates)).get_template("child.html")
        gc.collect()
        assert tmpl.render().endswith("<body>Hello World</body></html>")


class TestLoaders:
    """Built-in loaders."""

    def test_filesystem_loader(self, tmp_path):
        (tmp_path / "htmx").mkdir()
        (tmp_path / "base.html").write_text("<main>{% block content %}{% endblock %}</main>")
        (tmp_path / "htmx" / "tx.html").write_text(
            '{% extends "base.html" %}{% block content %}{{ hash }}{% endblock %}'
        )
        env = Environment(loader=FileSystemLoader(tmp_path))
        assert env.render("htmx/tx.html", hash="c0ffee") == "<main>c0ffee</main>"

    def test_filesystem_suffix(self, tmp_path):
        (tmp_path / "home.html").write_text("home")
        loader = FileSystemLoader(str(tmp_path), suffix=".html")
        source, filename = loader.get_source("home")
        assert source == "home"
        assert filename.endswith("home.html")
        assert loader.list_templates() == ["home"]

    def test_filesystem_search_order(self, tmp_path):
        custom = tmp_path / "custom"
        default = tmp_path / "default"
        custom.mkdir()
        default.mkdir()
        (custom / "nav.html").write_text("custom")
        (default / "nav.html").write_text("default")
        (default / "footer.html").write_text("footer")
        loader = FileSystemLoader([custom, default])
        assert loader.get_source("nav.html")[0] == "custom"
        assert loader.get_source("footer.html")[0] == "footer"
        assert loader.list_templates() == ["footer.html", "nav.html"]

    def test_filesystem_missing(self, tmp_path):
        with pytest.raises(TemplateNotFoundError, match="not found in"):
            FileSystemLoader(tmp_path).get_source("nope.html")

    def test_filesystem_directory_is_not_template(self, tmp_path):
        (tmp_path / "dir.html").mkdir()
        with pytest.raises(TemplateNotFoundError):
            FileSystemLoader(tmp_path).get_source("dir.html")

    def test_filesystem_read_error(self, tmp_path):
        """Undecodable files fail as not-found, chained to the cause."""
        (tmp_path / "bad.html").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(TemplateNotFoundError, match="could not be read") as exc_info:
            FileSystemLoader(tmp_path).get_source("bad.html")
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_dict_loader_suggestion(self):
        loader = DictLoader({"home.html": "", "block.html": ""})
        with pytest.raises(TemplateNotFoundError, match="Did you mean 'home.html'"):
            loader.get_source("hom.html")

    def test_choice_loader(self):
        loader = ChoiceLoader(
            [DictLoader({"nav.html": "custom"}), DictLoader({"nav.html": "x", "f.html": "f"})]
        )
        assert loader.get_source("nav.html")[0] == "custom"
        assert loader.get_source("f.html")[0] == "f"
        assert loader.list_templates() == ["f.html", "nav.html"]
        with pytest.raises(TemplateNotFoundError, match="any of 2 loaders"):
            loader.get_source("none.html")

    def test_function_loader(self):
        loader = FunctionLoader(lambda name: ("src", f"db://{name}") if name == "a" else None)
        assert loader.get_source("a") == ("src", "db://a")
        with pytest.raises(TemplateNotFoundError):
            loader.get_source("b")

    def test_function_loader_read_error(self):
        def load(name):
            raise OSError("disk on fire")

        with pytest.raises(TemplateNotFoundError, match="could not be read") as exc_info:
            FunctionLoader(load).get_source("a.html")
        assert isinstance(exc_info.value.__cause__, OSError)
