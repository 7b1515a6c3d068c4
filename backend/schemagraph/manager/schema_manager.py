"""Schema manager: orchestrates providers, cache, generation and validation.

The manager is the public generation API. None of its generation entry
points raise; failures are logged, recorded in the status report, and the
affected provider or schema is left out.
"""

from collections.abc import Callable
import copy
from datetime import datetime, timezone
import time
from typing import Any

from ..cache import SchemaCache
from ..config import Settings
from ..core.exceptions import ProviderError, SchemaGraphError, SchemaTypeError
from ..core.graph import SchemaGraph
from ..core.hooks import HookDispatcher, HookName
from ..core.logging import GenerationLogger, get_logger
from ..core.output import OutputService
from ..core.piece import SCHEMA_CONTEXT, SchemaPiece
from ..core.values import is_empty
from ..providers import DataProvider, ProviderRegistry
from ..schema_types import SchemaTypeRegistry
from ..validation import SchemaValidator, ValidationResult
from .status import GenerationStatus

logger = get_logger(__name__)

# Types whose repeated schemas are merged into the first occurrence
MERGED_TYPES = frozenset({"Organization", "LocalBusiness"})


class SchemaManager:
    """Generates schemas and graphs for a generation context."""

    def __init__(
        self,
        providers: ProviderRegistry,
        types: SchemaTypeRegistry,
        cache: SchemaCache,
        hooks: HookDispatcher,
        validator: SchemaValidator | None = None,
        settings: Settings | None = None,
        output: OutputService | None = None,
    ):
        self.providers = providers
        self.types = types
        self.cache = cache
        self.hooks = hooks
        self.validator = validator
        self.settings = settings or Settings()
        self.output = output or OutputService()

        self.caching_enabled = self.settings.caching_enabled
        self.validation_enabled = self.settings.validation_enabled
        self.status = GenerationStatus()
        self._providers_collected = False

    # Providers

    def register_provider(self, provider: DataProvider) -> bool:
        return self.providers.register_provider(provider)

    def unregister_provider(self, provider_id: str) -> bool:
        return self.providers.unregister_provider(provider_id)

    def get_providers(self) -> dict[str, DataProvider]:
        return self.providers.get_providers()

    def get_providers_for_context(
        self, context: str, options: dict[str, Any] | None = None
    ) -> list[DataProvider]:
        return self.providers.get_providers_for_context(context, options)

    def collect_providers(self) -> None:
        """Give extension code its one chance to register providers."""
        if self._providers_collected:
            return
        self._providers_collected = True
        self.hooks.notify(HookName.REGISTER_PROVIDERS, self)

    # Toggles

    def set_caching_enabled(self, enabled: bool) -> None:
        """Disable to bypass both the memo layer and the backing store."""
        self.caching_enabled = enabled

    def set_validation_enabled(self, enabled: bool) -> None:
        self.validation_enabled = enabled

    def clear_cache(self, context: str, options: dict[str, Any] | None = None) -> bool:
        """Drop the cached output of every provider for one context."""
        options = options or {}
        keys = []
        for provider in self.providers.get_providers().values():
            key = self.get_cache_key(provider, context, options)
            keys.extend([key, f"{key}_pieces"])
        return self.cache.delete_multiple(keys)

    def clear_all_cache(self) -> bool:
        return self.cache.delete_by_pattern("provider_*")

    # Generation

    def generate_schemas(
        self, context: str, options: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Generate flattened schemas from every applicable provider.

        Returns:
            Schemas in provider priority order, with repeated Organization
            and LocalBusiness schemas merged; empty on unexpected failure
        """
        options = options or {}
        self.collect_providers()
        self.status.generations += 1

        try:
            with GenerationLogger(logger, "generate_schemas", context=context) as generation:
                self.hooks.notify(HookName.BEFORE_GENERATION, context, options)

                collected = self._collect_data(context, options)
                collected = self.hooks.emit(HookName.COLLECTED_DATA, collected, context, options)

                schemas = []
                for provider_id, items in collected.items():
                    provider = self.providers.get_provider(provider_id)
                    supported = provider.get_supported_schema_types() if provider else []
                    for item in items:
                        schemas.extend(self._build_schemas(item, supported, context, options))

                schemas = self.deduplicate_schemas(schemas)
                generation.log_progress("Schemas generated", count=len(schemas))

                self.hooks.notify(HookName.AFTER_GENERATION, schemas, context, options)
                self.hooks.notify(HookName.SCHEMA_GENERATED, schemas, context)
                return schemas
        except Exception as e:
            self.status.record_error(context, f"Schema generation failed: {e}")
            return []
        finally:
            self.cache.reset_request()

    def generate_schema(
        self,
        schema_type: str,
        data: dict[str, Any],
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Generate one schema with the registered generator for ``schema_type``.

        Returns:
            The schema, or an empty mapping if the type is unknown, the
            generator fails or validation fails
        """
        options = options or {}
        try:
            schema = self.types.generate_schema(schema_type, data, options)
        except SchemaGraphError as e:
            logger.warning("Schema generation failed", schema_type=schema_type, error=str(e))
            self.status.record_error(schema_type, str(e))
            return {}

        schema = self.hooks.emit(HookName.TYPE_DATA, schema, schema_type, data)
        result = self._validate(schema, schema_type)
        if result is not None and not result.is_valid:
            return {}
        return schema

    def build_graph(self, context: str, options: dict[str, Any] | None = None) -> SchemaGraph:
        """Assemble the linked piece graph for a context.

        Provider failures are skipped, extension filters are applied and
        unresolved references are logged and reported but kept.
        """
        options = options or {}
        self.collect_providers()
        self.status.generations += 1
        graph = SchemaGraph()

        try:
            with GenerationLogger(logger, "build_graph", context=context) as generation:
                self.hooks.notify(HookName.BEFORE_GENERATION, context, options)

                for provider in self.get_providers_for_context(context, options):
                    try:
                        graph.add_pieces(self._collect_pieces(provider, context, options))
                    except Exception as e:
                        self._record_provider_failure(provider, context, e)

                graph.apply_filters(context, self.hooks)

                reference_errors = graph.validate_references()
                for error in reference_errors:
                    logger.warning("Unresolved graph reference", context=context, error=error)
                self.status.record_reference_errors(reference_errors)

                self._validate_pieces(graph)
                generation.log_progress("Graph assembled", pieces=graph.count())

                self.hooks.notify(HookName.AFTER_GENERATION, graph, context, options)
                self.hooks.notify(HookName.SCHEMA_GENERATED, graph, context)
        except Exception as e:
            self.status.record_error(context, f"Graph assembly failed: {e}")
            return SchemaGraph()
        finally:
            self.cache.reset_request()

        return graph

    def render(self, context: str, options: dict[str, Any] | None = None) -> str:
        """Build the graph and render it as a JSON-LD script tag."""
        return self.output.render(self.build_graph(context, options))

    # Reporting

    def get_system_status(self) -> dict[str, Any]:
        providers = self.get_providers()
        registered_types = self.types.get_registered_types()
        hooks = self.hooks.get_registered_hooks()
        return {
            "providers": {
                "count": len(providers),
                "list": [
                    {
                        "id": provider.provider_id,
                        "priority": provider.priority,
                        "available": provider.is_available(),
                        "types": provider.get_supported_schema_types(),
                    }
                    for provider in providers.values()
                ],
            },
            "schema_types": {"count": len(registered_types), "list": registered_types},
            "settings": {
                "caching_enabled": self.caching_enabled,
                "validation_enabled": self.validation_enabled,
                "validator_available": self.validator is not None,
                "suppress_invalid": self.settings.suppress_invalid,
            },
            "hooks": {"registered": len(hooks), "list": hooks},
            "cache": self.cache.get_stats().model_dump(),
        }

    def get_status_report(self) -> dict[str, Any]:
        """Error and warning counts plus the last error per type."""
        return self.status.to_dict()

    def get_performance_report(
        self, context: str, options: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        start = time.perf_counter()
        schemas = self.generate_schemas(context, options)
        elapsed = time.perf_counter() - start

        return {
            "context": context,
            "schemas_generated": len(schemas),
            "execution_time_ms": round(elapsed * 1000, 2),
            "providers_used": len(self.get_providers_for_context(context, options)),
            "cache_enabled": self.caching_enabled,
            "validation_enabled": self.validation_enabled,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # Helpers

    def get_cache_key(
        self, provider: DataProvider, context: str, options: dict[str, Any]
    ) -> str:
        """Provider cache key after the cache-key filter."""
        key = provider.get_cache_key(context, options)
        return str(self.hooks.emit(HookName.CACHE_KEY, key, context, options))

    def _cache_ttl(self, context: str, options: dict[str, Any]) -> int:
        ttl = self.settings.get_cache_ttl(context)
        return int(self.hooks.emit(HookName.CACHE_TTL, ttl, context, options))

    def _collect_data(
        self, context: str, options: dict[str, Any]
    ) -> dict[str, list[dict[str, Any]]]:
        """Raw data per provider id, read through the cache."""
        collected: dict[str, list[dict[str, Any]]] = {}
        for provider in self.get_providers_for_context(context, options):
            try:
                items = self._cached(
                    self.get_cache_key(provider, context, options),
                    context,
                    options,
                    lambda: self._provide(provider, context, options),
                )
            except Exception as e:
                self._record_provider_failure(provider, context, e)
                continue

            if items:
                collected[provider.provider_id] = items
        return collected

    def _provide(
        self, provider: DataProvider, context: str, options: dict[str, Any]
    ) -> list[dict[str, Any]]:
        data = provider.provide(context, options)
        data = self.hooks.emit(
            HookName.PROVIDER_DATA, data, context, options, provider.provider_id
        )
        if isinstance(data, dict):
            return [data]
        return [item for item in data or [] if isinstance(item, dict)]

    def _collect_pieces(
        self, provider: DataProvider, context: str, options: dict[str, Any]
    ) -> list[SchemaPiece]:
        """Provider pieces, read through the cache in flattened form."""
        key = f"{self.get_cache_key(provider, context, options)}_pieces"
        items = self._cached(
            key,
            context,
            options,
            lambda: [piece.to_array() for piece in provider.get_pieces(context, options)],
        )
        return [SchemaPiece.create_from_array(item) for item in items]

    def _cached(
        self, key: str, context: str, options: dict[str, Any], compute: Callable[[], Any]
    ) -> Any:
        """Read through the cache, copying values in and out of the memo layer."""
        if not self.caching_enabled:
            return compute()

        cached = self.cache.get(key)
        if cached is not None:
            return copy.deepcopy(cached)

        value = compute()
        if not is_empty(value):
            self.cache.set(key, copy.deepcopy(value), self._cache_ttl(context, options))
        return value

    def _build_schemas(
        self,
        item: dict[str, Any],
        supported_types: list[str],
        context: str,
        options: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Turn one provider item into validated schemas.

        Items carrying ``@context`` are complete and used as-is; items with
        only ``@type`` are generated for that type; untyped items are
        generated for every type the provider supports.
        """
        if "@type" in item:
            if "@context" in item:
                schema_type = str(item["@type"])
                schema = self.hooks.emit(
                    HookName.PRE_GENERATION_DATA, item, schema_type, options
                )
                candidates = [(schema_type, schema)]
            else:
                candidates = [self._generate(str(item["@type"]), item, options)]
        else:
            candidates = [
                self._generate(schema_type, item, options)
                for schema_type in supported_types
                if self.types.has_schema_type(schema_type)
            ]

        schemas = []
        for schema_type, schema in candidates:
            if not schema:
                continue
            schema = self.hooks.emit(HookName.TYPE_DATA, schema, schema_type, item)
            result = self._validate(schema, schema_type)
            if result is not None and not result.is_valid and self.settings.suppress_invalid:
                continue
            schemas.append(schema)
        return schemas

    def _generate(
        self, schema_type: str, data: dict[str, Any], options: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        try:
            return schema_type, self.types.generate_schema(schema_type, data, options)
        except SchemaTypeError as e:
            logger.debug("Skipping unregistered schema type", schema_type=schema_type)
            self.status.record_error(schema_type, str(e))
        except SchemaGraphError as e:
            logger.warning("Schema generation failed", schema_type=schema_type, error=str(e))
            self.status.record_error(schema_type, str(e))
        return schema_type, {}

    def _validate(self, schema: dict[str, Any], schema_type: str) -> ValidationResult | None:
        if not self.validation_enabled or self.validator is None:
            return None

        result = self.validator.validate(schema, schema_type)
        self.status.record_validation(schema_type, result)
        if not result.is_valid:
            logger.warning(
                "Schema validation failed",
                schema_type=schema_type,
                errors=result.error_messages,
            )
        elif result.has_warnings():
            logger.info(
                "Schema validation warnings",
                schema_type=schema_type,
                warnings=result.warning_messages,
            )
        return result

    def _validate_pieces(self, graph: SchemaGraph) -> None:
        for piece in graph.get_pieces():
            result = self._validate({"@context": SCHEMA_CONTEXT, **piece.to_array()}, piece.type)
            if result is not None and not result.is_valid and self.settings.suppress_invalid:
                graph.remove_piece(piece.id)

    def _record_provider_failure(
        self, provider: DataProvider, context: str, error: Exception
    ) -> None:
        failure = (
            error
            if isinstance(error, ProviderError)
            else ProviderError(str(error), provider.provider_id, cause=error)
        )
        cause = failure.cause or failure

        logger.warning(
            "Provider failed",
            provider_id=failure.provider_id,
            context=context,
            error=str(failure),
            error_type=type(cause).__name__,
        )
        self.status.record_provider_error(failure.provider_id, str(failure))

    @staticmethod
    def deduplicate_schemas(schemas: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Merge repeated Organization/LocalBusiness schemas into the first one."""
        unique: list[dict[str, Any]] = []
        seen: dict[str, int] = {}

        for schema in schemas:
            schema_type = schema.get("@type")
            if not isinstance(schema_type, str):
                continue

            if schema_type in MERGED_TYPES and schema_type in seen:
                index = seen[schema_type]
                unique[index] = merge_schemas(unique[index], schema)
            else:
                unique.append(schema)
                seen[schema_type] = len(unique) - 1

        return unique


def merge_schemas(first: dict[str, Any], second: dict[str, Any]) -> dict[str, Any]:
    """Fill empty properties of ``first`` from ``second``; union list values."""
    merged = dict(first)
    for property, value in second.items():
        if property in ("@context", "@type"):
            continue
        if is_empty(merged.get(property)):
            merged[property] = value
        elif isinstance(value, list) and isinstance(merged[property], list):
            merged[property] = merged[property] + [
                item for item in value if item not in merged[property]
            ]
    return merged
