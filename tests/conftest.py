"""
pytest configuration and shared fixtures for jinjalens tests.

Fixtures
--------
news_variables : dict
    A small variable mapping with a nested ``news`` object.

news_tree : VariableTree
    ``news_variables`` as a tree.

sample_template : str
    A realistic prompt template that lints clean against the built-in
    variables.
"""

import pytest

from jinjalens.variables import VariableTree


@pytest.fixture
def news_variables() -> dict:
    """Variables with one nested object, a list and a scalar."""
    return {
        "news": {
            "headline": "News article headline",
            "source": "News source name",
        },
        "rollups": {
            "btc": {
                "full": "Complete BTC analysis",
                "price": "Current BTC price",
            },
        },
        "tags": ["a", "b"],
        "count": 3,
    }


@pytest.fixture
def news_tree(news_variables: dict) -> VariableTree:
    """The news variables as a VariableTree."""
    return VariableTree.from_mapping(news_variables)


@pytest.fixture
def sample_template() -> str:
    """
    A prompt template using expressions, loops and comments.

    Every block is well formed and every root variable exists in
    ``DEFAULT_VARIABLES``.
    """
    return """# Should I buy BTC now?

## News Item

Time now: {{ system.time }}
Headline: {{ news.headline }}
Source: {{ news.source | upper }}
Symbols mentioned: {% for s in news.symbols_mentioned %}{{ loop.index }} {% endfor %}

{# analyst notes go here #}
{% if news.body %}
{{ news.body }}
{% else %}
No body.
{% endif %}

## Historical Context

{{ rollups["btc"].full }}
"""


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
