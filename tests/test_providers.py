"""
Tests for service providers and container bootstrap.
"""

import sys
import pytest
from pathlib import Path
from typing import Iterator, List

from ioc_container.application import current
from ioc_container.application.bootstrap import create_container
from ioc_container.application.container import Container
from ioc_container.application.providers import (
    ProviderRegistry,
    ServiceProvider,
    load_provider_class,
)
from ioc_container.core.exceptions import (
    AmbiguousAutoloadMountError,
    ProviderLoadError,
)
from ioc_container.infrastructure.config.models import ContainerConfig

PROVIDER_MODULE = '''
from ioc_container.application.providers import ServiceProvider


class RedisProvider(ServiceProvider):
    def register(self):
        self.container.singleton("My/Redis", lambda app: {"host": "localhost"})
        self.container.alias("Redis", "My/Redis")


class NotAProvider:
    pass
'''

EVENTS: List[str] = []


class ConfigProvider(ServiceProvider):
    def register(self) -> None:
        EVENTS.append("config.register")
        self.container.singleton("App/Config", lambda app: {"mail.driver": "smtp"})

    def boot(self) -> None:
        EVENTS.append("config.boot")


class MailProvider(ServiceProvider):
    def register(self) -> None:
        EVENTS.append("mail.register")
        self.container.bind(
            "App/Mail", lambda app: f"mail via {app.use('App/Config')['mail.driver']}")

    def boot(self) -> None:
        EVENTS.append("mail.boot")
        # Resolvable here because every provider has registered
        self.container.resolve("App/Mail")


@pytest.fixture(autouse=True)
def reset_events() -> Iterator[None]:
    EVENTS.clear()
    current.reset_container()
    yield
    current.reset_container()


@pytest.fixture
def provider_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    (tmp_path / "ioc_fixture_providers.py").write_text(PROVIDER_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "ioc_fixture_providers", raising=False)
    return "ioc_fixture_providers"


class TestProviderLoading:
    """Test cases for provider specifiers."""

    def test_load_from_colon_specifier(self, provider_module: str) -> None:
        provider_class = load_provider_class(f"{provider_module}:RedisProvider")

        assert issubclass(provider_class, ServiceProvider)
        assert provider_class.__name__ == "RedisProvider"

    def test_load_from_dotted_specifier(self, provider_module: str) -> None:
        assert load_provider_class(f"{provider_module}.RedisProvider").__name__ == "RedisProvider"

    def test_load_class_directly(self) -> None:
        assert load_provider_class(ConfigProvider) is ConfigProvider

    @pytest.mark.parametrize("spec", [
        "ioc_container_no_such_module:Provider",
        "ioc_fixture_providers:Missing",
        "ioc_fixture_providers:NotAProvider",
        "NoModule",
    ])
    def test_invalid_specifiers(self, provider_module: str, spec: str) -> None:
        with pytest.raises(ProviderLoadError):
            load_provider_class(spec)

    def test_non_provider_class(self) -> None:
        with pytest.raises(ProviderLoadError):
            load_provider_class(dict)  # type: ignore[arg-type]


class TestProviderRegistry:
    """Test cases for the register and boot phases."""

    def test_register_runs_before_boot(self) -> None:
        container = Container()
        registry = ProviderRegistry(container)

        registry.register_and_boot([MailProvider, ConfigProvider])

        assert EVENTS == ["mail.register", "config.register", "mail.boot", "config.boot"]
        assert container.resolve("App/Mail") == "mail via smtp"
        assert registry.booted

    def test_boot_runs_once(self) -> None:
        registry = ProviderRegistry(Container())
        registry.register([ConfigProvider])

        registry.boot()
        registry.boot()

        assert EVENTS.count("config.boot") == 1
        assert [provider.name for provider in registry.providers] == ["ConfigProvider"]


class TestBootstrap:
    """Test cases for create_container."""

    def test_create_from_config(self, tmp_path: Path, provider_module: str) -> None:
        (tmp_path / "Services").mkdir()
        (tmp_path / "Services" / "Foo.py").write_text("NAME = 'foo'\n", encoding="utf-8")
        config = ContainerConfig(
            cache_fakes=True,
            autoload={"App": str(tmp_path)},
            aliases={"Foo": "App/Services/Foo"},
            providers=[f"{provider_module}:RedisProvider"],
        )

        container = create_container(config, providers=[ConfigProvider])

        assert container.cache_fakes is True
        assert container.resolve("Foo").NAME == "foo"
        assert container.resolve("Redis") is container.resolve("My/Redis")
        assert container.resolve("App/Config") == {"mail.driver": "smtp"}
        assert not current.has_container()

    def test_install(self) -> None:
        container = create_container(install=True)

        assert current.get_container() is container

    def test_defaults(self) -> None:
        container = create_container()

        assert container.cache_fakes is False
        assert container.get_registrations() == {}

    def test_conflicting_autoload_in_config(self, tmp_path: Path) -> None:
        container = create_container(ContainerConfig(autoload={"App": str(tmp_path)}))

        with pytest.raises(AmbiguousAutoloadMountError):
            container.mount_autoload("App", tmp_path / "other")
