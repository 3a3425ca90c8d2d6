"""Tests for hitrouter.config — frozen RouterConfig."""

import dataclasses

import pytest

from hitrouter.config import RouterConfig


class TestRouterConfig:
    def test_defaults(self) -> None:
        config = RouterConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.debug is False
        assert config.introspection is True
        assert config.endpoints_path == "/endpoints"
        assert config.endpoints_unhit_path == "/endpoints/unhit"
        assert config.json_indent == 2
        assert config.redirect_trailing_slash is True

    def test_frozen(self) -> None:
        config = RouterConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.debug = True  # type: ignore[misc]

    def test_replace(self) -> None:
        config = dataclasses.replace(RouterConfig(), port=9000)
        assert config.port == 9000
        assert config.host == "127.0.0.1"
