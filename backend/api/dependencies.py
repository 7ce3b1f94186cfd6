"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations from Settings.
"""

import logging
from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.developers.interfaces import IDeveloperStore
    from modules.developers.service import DeveloperService
    from modules.events.interfaces import IEventNotifier
    from modules.licensing.interfaces import ILicenseService
    from modules.licensing.models import LicensePolicy
    from modules.payments.interfaces import IPaymentGateway

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self._store: "IDeveloperStore | None" = None
        self._gateway: "IPaymentGateway | None" = None
        self._notifier: "IEventNotifier | None" = None
        self._developer_service: "DeveloperService | None" = None
        self._license_service: "ILicenseService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def policy(self) -> "LicensePolicy":
        from modules.licensing.models import LicensePolicy
        return LicensePolicy.from_settings(self.settings)

    @property
    def store(self) -> "IDeveloperStore":
        """Get the credential store (Supabase, or in-memory when unconfigured)."""
        if self._store is None:
            if self.settings.supabase_url and self.settings.supabase_service_role_key:
                from modules.developers.repository import DeveloperRepository
                from shared.database import get_supabase_client
                self._store = DeveloperRepository(
                    get_supabase_client(),
                    self.settings.developers_table,
                )
            else:
                from modules.developers.memory import InMemoryDeveloperStore
                logger.warning("Supabase is not configured, developers are kept in memory")
                self._store = InMemoryDeveloperStore()
        return self._store

    @property
    def gateway(self) -> "IPaymentGateway":
        """Get the payment gateway instance."""
        if self._gateway is None:
            from modules.payments.stripe_gateway import StripeGateway
            self._gateway = StripeGateway.from_settings(self.settings)
        return self._gateway

    @property
    def notifier(self) -> "IEventNotifier":
        """Get the event notifier instance."""
        if self._notifier is None:
            from modules.events.service import create_event_notifier
            self._notifier = create_event_notifier(self.settings)
        return self._notifier

    @property
    def developers(self) -> "DeveloperService":
        """Get the developer account service."""
        if self._developer_service is None:
            from modules.developers.service import DeveloperService
            self._developer_service = DeveloperService(
                store=self.store,
                notifier=self.notifier,
                trial_period=self.policy.trial_period,
            )
        return self._developer_service

    @property
    def licenses(self) -> "ILicenseService":
        """Get the license lifecycle service."""
        if self._license_service is None:
            from modules.licensing.service import LicenseService
            self._license_service = LicenseService(
                store=self.store,
                gateway=self.gateway,
                notifier=self.notifier,
                policy=self.policy,
            )
        return self._license_service

    async def aclose(self) -> None:
        """Flush pending event deliveries."""
        if self._notifier is not None:
            await self._notifier.aclose()

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._store = None
        self._gateway = None
        self._notifier = None
        self._developer_service = None
        self._license_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container with new
    service instances. Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_developer_service() -> "DeveloperService":
    """FastAPI dependency for the developer service."""
    return get_container().developers


def get_license_service() -> "ILicenseService":
    """FastAPI dependency for the license service."""
    return get_container().licenses
