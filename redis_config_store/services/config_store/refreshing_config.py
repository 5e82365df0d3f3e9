"""
Refreshing Config
In-process snapshot of a config store, reloaded on local writes and on
remote changes reported by its extensions
"""
from typing import Dict, Any, List, Optional

from redis_config_store.core.exceptions import ArgumentError
from redis_config_store.services.config_store.types import (
    ChangePublisher,
    ListeningExtension,
    RefreshPolicy,
)
from redis_config_store.utils.logging import get_logger

logger = get_logger(__name__)


class RefreshingConfig:
    """
    Owns a store and a list of extensions.
    Refresh policies bind this object as their subscriber; change publishers
    are told about every successful write.
    """

    def __init__(self, store):
        if store is None:
            raise ArgumentError("Missing store")
        self.store = store
        self.extensions: List[Any] = []
        self._values: Optional[Dict[str, Any]] = None

    def with_extension(self, extension) -> "RefreshingConfig":
        if extension is None:
            raise ArgumentError("Missing extension")
        if isinstance(extension, RefreshPolicy):
            extension.subscribe(self)
        self.extensions.append(extension)
        return self

    async def start(self) -> None:
        """Start every listening extension; runs implicitly on first use"""
        for extension in self.extensions:
            if isinstance(extension, ListeningExtension):
                await extension.start()

    async def refresh(self) -> Dict[str, Any]:
        """Reload the snapshot from the store"""
        await self.start()
        self._values = await self.store.get_all()
        logger.debug(f"Config refreshed: {len(self._values)} values")
        return self._values

    async def get_all(self) -> Dict[str, Any]:
        if self._values is None:
            await self.refresh()
        return dict(self._values)

    async def get(self, name: str, default: Any = None) -> Any:
        if self._values is None:
            await self.refresh()
        return self._values.get(name, default)

    async def set(self, name: str, value: Any) -> Any:
        await self.start()
        result = await self.store.set(name, value)
        await self._on_change()
        return result

    async def delete(self, name: str) -> int:
        await self.start()
        result = await self.store.delete(name)
        await self._on_change()
        return result

    async def _on_change(self) -> None:
        # The write is already committed; announce it even if the local reload fails
        try:
            await self.refresh()
        finally:
            for extension in self.extensions:
                if isinstance(extension, ChangePublisher):
                    await extension.publish()
