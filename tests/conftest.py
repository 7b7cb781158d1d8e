"""
Pytest fixtures for filter tests
"""

import pytest

from twigfilters.config import FilterConfig, set_config


@pytest.fixture(autouse=True)
def default_config():
    """Run every test with default switches, independent of the environment"""
    set_config(FilterConfig())
    yield
    set_config(None)


@pytest.fixture
def ctx():
    """Call context handed to filters"""
    return {'globals': {'site_name': 'Test'}}


@pytest.fixture
def sorted_mappings():
    """Enumerate mappings sorted by key"""
    set_config(FilterConfig(sort_mapping_keys=True))


@pytest.fixture
def diagnostics():
    """Log degraded filters at WARNING"""
    set_config(FilterConfig(diagnostics=True))
