"""Pytest configuration and fixtures for Trellis tests."""

import pytest

from trellis import DictLoader, Environment, FunctionLoader, TemplateCache


@pytest.fixture
def env():
    """Create a basic Trellis Environment."""
    return Environment()


@pytest.fixture
def env_strict():
    """Create a Trellis Environment with strict mode enabled."""
    return Environment(strict=True)


@pytest.fixture
def explorer_templates():
    """Templates shaped like the block explorer's pages."""
    return {
        "base.html": (
            "<html>"
            "<head><title>{% block title %}Explorer{% endblock %}</title></head>"
            "<body>{% block content %}{% endblock %}</body>"
            "</html>"
        ),
        "child.html": '{% extends "base.html" %}{% block content %}Hello World{% endblock %}',
        "home.html": (
            '{% extends "base.html" %}\n'
            "{% block title %}\n  Home\n{% endblock %}\n"
            "{% block content %}\n"
            "<h1>{{ network }}</h1>\n"
            "<ul>{% for b in blocks %}<li>{{ b.height }}:{{ b.num_txes }}</li>{% endfor %}</ul>\n"
            "{% endblock %}\n"
        ),
        "htmx/network_info.html": "<dd>{{ height }}</dd><dd>{{ hash_rate }}</dd>",
        "broken_loop.html": "{% for tx in mempool %}{{ tx.tx_hash }}{% endfor %}",
        "orphan.html": '{% extends "missing_base.html" %}{% block content %}x{% endblock %}',
    }


@pytest.fixture
def env_with_loader(explorer_templates):
    """Create a Trellis Environment with DictLoader and explorer templates."""
    return Environment(loader=DictLoader(explorer_templates))


class CountingLoader:
    """Wraps a mapping and records every backing-store read."""

    def __init__(self, mapping: dict[str, str]):
        self.mapping = mapping
        self.reads: list[str] = []
        self._loader = FunctionLoader(self._load)

    def _load(self, name: str) -> str | None:
        self.reads.append(name)
        return self.mapping.get(name)

    def get_source(self, name: str) -> tuple[str, str | None]:
        return self._loader.get_source(name)


@pytest.fixture
def counting_loader(explorer_templates):
    """A loader that counts reads, over the explorer templates."""
    return CountingLoader(explorer_templates)


@pytest.fixture
def counting_env(counting_loader):
    """Environment over a counting loader with its own cache."""
    return Environment(loader=counting_loader, cache=TemplateCache())
