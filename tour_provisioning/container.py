"""Dependency injection container.

This module provides a simple DI container without external frameworks.
It allows registering and resolving dependencies for the application.

Design principles:
1. No magic - explicit registration and resolution
2. Testable - easy to swap implementations
3. Lazy loading - adapters instantiated on first use
4. Thread-safe - for web server contexts
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        service = container.resolve(TourProvisioningService)

        # Testing
        container = Container()
        container.register(StorePort, lambda: InMemoryStore())
        store = container.resolve(StorePort)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)
            self._singletons.pop(port_type, None)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_singletons(self) -> None:
        """Clear all cached singletons.

        Call this in tests to ensure fresh instances.
        """
        with self._lock:
            self._singletons.clear()

    def clear_all(self) -> None:
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default bindings from configuration.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.cache import QueryCache
        from .adapters.notify import LoggingNotifier
        from .adapters.store import InMemoryStore
        from .ports.cache import CachePort
        from .ports.geocoding import GeocoderPort
        from .ports.notifier import NotifierPort
        from .ports.store import StorePort
        from .services import TourCatalog, TourProvisioningService

        config = config or get_config()
        container = cls(config=config)

        # Store based on config
        def create_store() -> StorePort:
            if config.store.backend == "supabase":
                from .adapters.store.supabase_store import SupabaseStore

                return SupabaseStore.from_config(config.store)
            return InMemoryStore()

        container.register(StorePort, create_store)

        # View cache (shared by readers and writers)
        cache: QueryCache[Any] = QueryCache(name="views")
        container.register(CachePort, lambda: cache)

        container.register(NotifierPort, lambda: LoggingNotifier())

        # Geocoding is opt-in
        if config.geocoding.enabled:
            from .adapters.geocoding import NominatimGeocoderAdapter

            container.register(
                GeocoderPort,
                lambda: NominatimGeocoderAdapter(config.geocoding),
            )

        def create_provisioning_service() -> TourProvisioningService:
            return TourProvisioningService(
                store=container.resolve(StorePort),
                cache=container.resolve(CachePort),
                notifier=container.resolve(NotifierPort),
                config=config.provisioning,
                geocoder=(
                    container.resolve(GeocoderPort)
                    if container.is_registered(GeocoderPort)
                    else None
                ),
            )

        container.register(TourProvisioningService, create_provisioning_service)
        container.register(
            TourCatalog,
            lambda: TourCatalog(
                store=container.resolve(StorePort),
                cache=container.resolve(CachePort),
            ),
        )

        return container


# Global default container (lazy initialized)
_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get the default application container, creating it if needed."""
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Reset the default container.

    Call this in tests to ensure a fresh container.
    """
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None
