import logging

from jinja2 import Environment
from markupsafe import Markup

from kanopi_pack.core.assets import AssetLoader
from kanopi_pack.core.templates import (
    AssetTagCollector,
    create_templates_instance,
    install_asset_globals,
    versioned_url,
)
from kanopi_pack.schemas.configuration import LoaderConfiguration
from kanopi_pack.services.registry import InstanceRegistry


class TestVersionedUrl:
    """Test cache-busting query strings."""

    def test_no_version(self):
        assert versioned_url("/js/app.js", None) == "/js/app.js"

    def test_version_appended(self):
        assert versioned_url("/js/app.js", "1.2") == "/js/app.js?ver=1.2"
        assert versioned_url("/js/app.js?lang=en", "1.2") == "/js/app.js?lang=en&ver=1.2"


class TestAssetTagCollector:
    """Test collecting and rendering enqueued assets."""

    def test_handles_are_enqueued_once(self, collector):
        collector.enqueue_script("app", "/js/app.js", [], None, True)
        collector.enqueue_script("app", "/js/other.js", [], None, True)

        assert list(collector.scripts) == ["app"]
        assert collector.scripts["app"].url == "/js/app.js"

    def test_styles_must_be_registered_first(self, collector, caplog):
        with caplog.at_level(logging.WARNING):
            collector.enqueue_style("app")

        assert collector.styles == {}
        assert "must be registered" in caplog.text

    def test_footer_scripts_follow_dependencies(self, collector):
        collector.enqueue_script("app", "/js/app.js", ["vendor"], None, True)
        collector.enqueue_script("vendor", "/js/vendor.js", [], None, True)

        assert collector.render_footer() == (
            '<script id="vendor-js" src="/js/vendor.js"></script>\n'
            '<script id="app-js" src="/js/app.js"></script>'
        )

    def test_external_dependencies_are_pulled_in(self, collector):
        collector.register_external_script("jquery", "https://cdn.example.com/jquery.js", version="3.7")
        collector.enqueue_script("app", "/js/app.js", ["jquery", "unknown-lib"], "1.0", True)

        assert [asset.handle for asset in collector.ordered_scripts()] == ["jquery", "app"]
        assert 'src="https://cdn.example.com/jquery.js?ver=3.7"' in collector.render_footer()

    def test_head_output(self, collector):
        collector.register_style("vendor", "/css/vendor.css", [], None)
        collector.register_style("app", "/css/app.css", ["vendor"], "2.0")
        collector.enqueue_style("app")
        collector.enqueue_script("runtime", "/js/runtime.js", [], None, True)
        collector.enqueue_script("editor-style", "/js/editor-style.js", ["runtime"], None, False)
        collector.enqueue_script("app", "/js/app.js", ["runtime"], None, True)

        head = collector.render_head()
        footer = collector.render_footer()

        assert isinstance(head, Markup)
        assert head == (
            '<link rel="stylesheet" id="vendor-css" href="/css/vendor.css" media="all" />\n'
            '<link rel="stylesheet" id="app-css" href="/css/app.css?ver=2.0" media="all" />\n'
            '<script id="runtime-js" src="/js/runtime.js"></script>\n'
            '<script id="editor-style-js" src="/js/editor-style.js"></script>'
        )
        assert footer == '<script id="app-js" src="/js/app.js"></script>'

    def test_urls_are_escaped(self, collector):
        collector.enqueue_script("app", '/js/app.js?a=1"><b>', [], "1", True)

        assert '"><b>' not in collector.render_footer()
        assert "&amp;ver=1" in collector.render_footer()

    def test_loader_output(self, collector):
        loader = AssetLoader(
            "https://example.com",
            None,
            LoaderConfiguration(version="1.0", script_path="/js/", style_path="/css/"),
        )
        loader.register_vendor_script("vendor")
        loader.register_runtime_script("runtime")
        loader.register_application("app")

        loader.enqueue_all(collector)

        assert collector.render_head() == (
            '<link rel="stylesheet" id="kanopi-pack-app-css" href="https://example.com/css/app.css?ver=1.0" media="all" />'
        )
        assert collector.render_footer() == (
            '<script id="kanopi-pack-vendor-js" src="https://example.com/js/vendor.js?ver=1.0"></script>\n'
            '<script id="kanopi-pack-runtime-js" src="https://example.com/js/runtime.js?ver=1.0"></script>\n'
            '<script id="kanopi-pack-app-js" src="https://example.com/js/app.js?ver=1.0"></script>'
        )


class TestTemplateGlobals:
    """Test Jinja2 helpers installed into an environment."""

    def test_install_asset_globals(self, collector):
        registry = InstanceRegistry()
        registry.register(
            LoaderConfiguration(static_path="/static/"), production_url="https://example.com"
        )
        environment = Environment(autoescape=True)
        install_asset_globals(environment, registry)
        collector.enqueue_script("app", "/js/app.js", [], None, True)

        template = environment.from_string(
            "{{ asset_head(assets) }}|{{ asset_footer(assets) }}|{{ static_asset_url('logo.svg') }}"
        )

        assert template.render(assets=collector) == (
            '|<script id="app-js" src="/js/app.js"></script>|https://example.com/static/logo.svg'
        )

    def test_unknown_instance_renders_empty(self):
        environment = Environment(autoescape=True)
        install_asset_globals(environment, InstanceRegistry())

        assert environment.from_string("{{ static_asset_url('logo.svg', 'plugin') }}").render() == ""

    def test_create_templates_instance(self, tmp_path):
        (tmp_path / "base.html").write_text("<head>{{ asset_head(assets) }}</head>")
        collector = AssetTagCollector()
        collector.register_style("app", "/css/app.css", [], None)
        collector.enqueue_style("app")

        templates = create_templates_instance(str(tmp_path))

        assert "static_asset_url" in templates.env.globals
        assert templates.get_template("base.html").render(assets=collector) == (
            '<head><link rel="stylesheet" id="app-css" href="/css/app.css" media="all" /></head>'
        )
