"""Registry of data providers keyed by provider id."""

from typing import Any

from ..core.hooks import HookDispatcher, HookName
from ..core.logging import get_logger
from .interface import DataProvider

logger = get_logger(__name__)


class ProviderRegistry:
    """Holds registered providers in registration order.

    Re-registering an id replaces the earlier provider and moves it to the
    end of the registration order.
    """

    def __init__(self, hooks: HookDispatcher | None = None):
        self.hooks = hooks
        self._providers: dict[str, DataProvider] = {}

    def register_provider(self, provider: DataProvider) -> bool:
        """Register a provider.

        Returns:
            False if the provider reports itself unavailable
        """
        if not provider.is_available():
            logger.info("Provider unavailable, not registered", provider_id=provider.provider_id)
            return False

        self._providers.pop(provider.provider_id, None)
        self._providers[provider.provider_id] = provider

        logger.debug(
            "Provider registered",
            provider_id=provider.provider_id,
            priority=provider.priority,
        )
        if self.hooks:
            self.hooks.notify(HookName.PROVIDER_REGISTERED, provider.provider_id, provider)
        return True

    def unregister_provider(self, provider_id: str) -> bool:
        if provider_id not in self._providers:
            return False

        del self._providers[provider_id]
        if self.hooks:
            self.hooks.notify(HookName.PROVIDER_UNREGISTERED, provider_id)
        return True

    def get_providers(self) -> dict[str, DataProvider]:
        return dict(self._providers)

    def get_provider(self, provider_id: str) -> DataProvider | None:
        return self._providers.get(provider_id)

    def has_provider(self, provider_id: str) -> bool:
        return provider_id in self._providers

    def get_providers_for_context(
        self, context: str, options: dict[str, Any] | None = None
    ) -> list[DataProvider]:
        """Providers that apply to ``context``, by ascending priority.

        Equal priorities keep registration order. A provider whose
        ``can_provide`` raises is logged and left out.
        """
        options = options or {}
        applicable = []
        for provider in self._providers.values():
            try:
                if provider.can_provide(context, options):
                    applicable.append(provider)
            except Exception as e:
                logger.warning(
                    "Provider applicability check failed",
                    provider_id=provider.provider_id,
                    context=context,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        return sorted(applicable, key=lambda provider: provider.priority)

    def get_providers_by_schema_type(self, schema_type: str) -> list[DataProvider]:
        return [
            provider
            for provider in self._providers.values()
            if schema_type in provider.get_supported_schema_types()
        ]

    def __len__(self) -> int:
        return len(self._providers)
