"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, path: str, name: str | None, dataset: str) -> None:
        self._log.info("config.loaded", path=path, name=name, dataset=dataset)

    def config_unbounded_concurrency_warning(self, path: str) -> None:
        self._log.warning(
            "config.unbounded_concurrency",
            path=path,
            message="execution.max_concurrency is not set; all runs start at once",
        )
