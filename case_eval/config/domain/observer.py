"""Observer port for the config domain — defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(self, path: str, name: str | None, dataset: str) -> None: ...

    def config_unbounded_concurrency_warning(self, path: str) -> None: ...
