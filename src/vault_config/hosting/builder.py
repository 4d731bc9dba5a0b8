"""Host builder.

Pairs a ServiceCollection with a ConfigurationManager. Registration helpers
(add_vault, add_vault_service, ...) act on the builder; build() freezes the
services into a Host.

    builder = HostApplicationBuilder()
    builder.configuration.add_in_memory_collection({"Database:Host": "db"})
    add_vault(builder, configure, environment="production")

    with builder.build() as host:
        host.configuration["Database:Password"]
"""

from __future__ import annotations

from vault_config.configuration.root import ConfigurationManager, ConfigurationRoot
from vault_config.hosting.services import ServiceCollection, ServiceProvider


class Host:
    """A built application host.

    Attributes:
        services: Resolves registered singletons.
        configuration: The layered configuration (also registered as
            ConfigurationRoot).
    """

    def __init__(
        self, *, services: ServiceProvider, configuration: ConfigurationManager
    ) -> None:
        self.services = services
        self.configuration = configuration

    def close(self) -> None:
        """Stop configuration reload threads and close owned services."""
        self.configuration.close()
        self.services.close()

    def __enter__(self) -> Host:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class HostApplicationBuilder:
    """Collects services and configuration before the host is built."""

    def __init__(
        self,
        *,
        services: ServiceCollection | None = None,
        configuration: ConfigurationManager | None = None,
    ) -> None:
        self.services = services if services is not None else ServiceCollection()
        self.configuration = (
            configuration if configuration is not None else ConfigurationManager()
        )
        self._built = False

    def build(self) -> Host:
        """Build the host. Can only be called once.

        Raises:
            RuntimeError: If the builder was already built.
        """
        if self._built:
            raise RuntimeError("HostApplicationBuilder.build() can only be called once")
        self._built = True

        if ConfigurationRoot not in self.services:
            self.services.add_singleton(ConfigurationRoot, self.configuration)

        return Host(
            services=self.services.build_service_provider(),
            configuration=self.configuration,
        )
