from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConfigSubscriber(Protocol):
    """Object refreshed when another process changes the config"""

    def refresh(self) -> Any:
        ...


@runtime_checkable
class ChangePublisher(Protocol):
    """Extension announcing local changes to other processes"""

    async def publish(self) -> Any:
        ...


@runtime_checkable
class RefreshPolicy(Protocol):
    """Extension that binds a subscriber and decides when it refreshes"""

    def subscribe(self, subscriber: ConfigSubscriber) -> None:
        ...


@runtime_checkable
class ListeningExtension(Protocol):
    """Extension holding a channel subscription that must be started inside the event loop"""

    async def start(self) -> None:
        ...
