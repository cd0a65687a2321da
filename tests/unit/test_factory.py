# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx
import pytest

from hypertyper.client import Client
from hypertyper.config import ClientConfig
from hypertyper.errors import ConfigError
from hypertyper.factory import ClientFactory, validate_config
from hypertyper.http.httpx_transport import HttpxTransport
from hypertyper.testing import StubTransport


class RecordingTransportFactory:
    def __init__(self):
        self.configs = []
        self.transports = []

    def __call__(self, config):
        self.configs.append(config)
        transport = StubTransport()
        self.transports.append(transport)
        return transport


def test_build_produces_independent_clients_sharing_config():
    transports = RecordingTransportFactory()
    cfg = ClientConfig(base_url="https://api.example.com", default_headers={"X-A": "1"}, timeout=5.0)
    factory = ClientFactory(cfg, transport_factory=transports)

    first = factory.build()
    second = factory.build()

    assert isinstance(first, Client)
    assert first is not second
    assert first.config is cfg and second.config is cfg
    assert transports.configs == [cfg, cfg]
    assert transports.transports[0] is not transports.transports[1]

    first.close()
    assert transports.transports[0].closed is True
    assert transports.transports[1].closed is False


def test_default_factory_builds_httpx_clients(monkeypatch):
    monkeypatch.setattr(httpx, "Client", lambda **kwargs: object())
    client = ClientFactory().build()
    assert isinstance(client._transport, HttpxTransport)


@pytest.mark.parametrize(
    "changes",
    [
        {"base_url": "not a url"},
        {"base_url": "ftp://example.com"},
        {"base_url": "https://example.com?q=1"},
        {"timeout": -1},
        {"timeout": float("nan")},
        {"default_headers": {"Bad Header": "x"}},
        {"default_headers": {"X-A": "line\nbreak"}},
        {"user_agent": "agent\r\nX-Injected: 1"},
        {"verify_tls": "yes"},
        {"default_headers": 5},
        {"default_headers": "ab"},
    ],
)
def test_invalid_configuration_raises_config_error(changes):
    transports = RecordingTransportFactory()
    with pytest.raises(ConfigError):
        ClientFactory(ClientConfig(**changes), transport_factory=transports)
    assert transports.configs == []


def test_validate_config_reports_every_problem():
    with pytest.raises(ConfigError) as info:
        validate_config(ClientConfig(base_url="nope", timeout=-5))
    assert "base_url" in info.value.reason
    assert "negative" in info.value.reason


def test_validate_config_rejects_non_configs():
    with pytest.raises(ConfigError):
        ClientFactory({"base_url": "https://example.com"})  # type: ignore[arg-type]


def test_zero_and_disabled_timeouts_are_valid():
    ClientFactory(ClientConfig(timeout=0), transport_factory=RecordingTransportFactory())
    ClientFactory(ClientConfig(timeout=None), transport_factory=RecordingTransportFactory())


def test_with_user_agent():
    factory = ClientFactory.with_user_agent(
        "my cool user agent",
        base_url="https://api.example.com",
        transport_factory=RecordingTransportFactory(),
    )
    assert factory.config.user_agent == "my cool user agent"
    assert factory.config.base_url == "https://api.example.com"
    request = factory.build().prepare("GET", "/x")
    assert request.headers["User-Agent"] == "my cool user agent"

    with pytest.raises(ConfigError):
        ClientFactory.with_user_agent("ua", unknown_option=True)
    with pytest.raises(ConfigError) as info:
        ClientFactory.with_user_agent("ua", default_headers="ab")
    assert "default_headers must be a mapping" in info.value.reason


def test_from_env(monkeypatch):
    monkeypatch.setenv("HYPERTYPER_BASE_URL", "https://env.example.com/api")
    monkeypatch.setenv("HYPERTYPER_HTTP_TIMEOUT", "2.5")
    factory = ClientFactory.from_env(transport_factory=RecordingTransportFactory(), verify_tls=False)
    assert factory.config.base_url == "https://env.example.com/api"
    assert factory.config.timeout == 2.5
    assert factory.config.verify_tls is False


def test_from_env_validates(monkeypatch):
    monkeypatch.setenv("HYPERTYPER_BASE_URL", "definitely not a url")
    with pytest.raises(ConfigError):
        ClientFactory.from_env()


def test_reconfigure_returns_new_validated_factory():
    transports = RecordingTransportFactory()
    factory = ClientFactory(ClientConfig(base_url="https://a.example"), transport_factory=transports)

    other = factory.reconfigure(base_url="https://b.example")

    assert other is not factory
    assert other.config.base_url == "https://b.example"
    assert factory.config.base_url == "https://a.example"
    other.build()
    assert transports.configs[-1].base_url == "https://b.example"

    with pytest.raises(ConfigError):
        factory.reconfigure(timeout=-1)
    with pytest.raises(ConfigError):
        factory.reconfigure(no_such_field=1)
