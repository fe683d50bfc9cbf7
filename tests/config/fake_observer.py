"""FakeConfigObserver — records config domain events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConfigLoadedEvent:
    path: str
    name: str | None
    dataset: str


@dataclass(frozen=True)
class UnboundedConcurrencyEvent:
    path: str


class FakeConfigObserver:
    """Does NOT inherit from ConfigObserver (structural typing via Protocol)."""

    def __init__(self) -> None:
        self.events: list[ConfigLoadedEvent | UnboundedConcurrencyEvent] = []

    def config_loaded(self, path: str, name: str | None, dataset: str) -> None:
        self.events.append(ConfigLoadedEvent(path=path, name=name, dataset=dataset))

    def config_unbounded_concurrency_warning(self, path: str) -> None:
        self.events.append(UnboundedConcurrencyEvent(path=path))
