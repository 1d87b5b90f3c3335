"""Dependency injection container for Fleet Finance.

Usage:
    from fleet_finance.container import get_container

    container = get_container()
    service = container.document_service
"""

from functools import cached_property, lru_cache
from typing import TYPE_CHECKING

from fleet_finance.config import Settings, get_settings
from fleet_finance.logging_config import get_logger

if TYPE_CHECKING:
    from fleet_finance.services.documents import DocumentService
    from fleet_finance.store import DocumentStoreClient

logger = get_logger(__name__)


class Container:
    """Lazily builds and caches the application's services.

    Tests can pass their own settings:

        container = Container(settings=Settings(document_store_url="https://store.test"))
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        logger.debug(
            "container_created",
            environment=self._settings.environment.value,
            document_store_enabled=self._settings.document_store_enabled,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @cached_property
    def document_store(self) -> "DocumentStoreClient | None":
        """Client for the hosted store, or None when no URL is configured."""
        if not self._settings.document_store_url:
            logger.info("document_store_disabled")
            return None

        from fleet_finance.store import DocumentStoreClient

        logger.info(
            "initializing_document_store",
            # The URL host only; keys never go to the log
            host=self._settings.document_store_url.split("://")[-1].split("/")[0],
        )
        return DocumentStoreClient(
            self._settings.document_store_url,
            self._settings.document_store_key,
            timeout=self._settings.document_store_timeout,
        )

    @cached_property
    def document_service(self) -> "DocumentService":
        from fleet_finance.services.documents import DocumentService

        return DocumentService(self.document_store, self._settings.company_id)

    def close(self) -> None:
        """Close all resources held by the container."""
        store = self.__dict__.get("document_store")
        if store is not None:
            logger.info("closing_document_store")
            store.close()

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


_container: Container | None = None


@lru_cache
def get_container() -> Container:
    """Get the global container singleton."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Reset the global container."""
    global _container
    if _container is not None:
        _container.close()
        _container = None
    get_container.cache_clear()


# FastAPI dependency functions
def get_settings_dependency() -> Settings:
    return get_container().settings


def get_document_service() -> "DocumentService":
    """FastAPI dependency for the document service."""
    return get_container().document_service
