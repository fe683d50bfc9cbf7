"""Structlog implementation of the DatasetObserver port."""

import structlog


class StructlogDatasetObserver:
    """Delegates dataset domain events to structlog.

    Satisfies the DatasetObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def dataset_loading_started(self, source: str, fmt: str) -> None:
        self._log.info("dataset.loading_started", source=source, fmt=fmt)

    def dataset_case_loaded(self, case_name: str) -> None:
        self._log.debug("dataset.case_loaded", case_name=case_name)

    def dataset_loading_completed(self, source: str, total_cases: int) -> None:
        self._log.info(
            "dataset.loading_completed",
            source=source,
            total_cases=total_cases,
        )

    def dataset_loading_failed(self, source: str, reason: str) -> None:
        self._log.error("dataset.loading_failed", source=source, reason=reason)

    def dataset_saved(self, path: str, total_cases: int) -> None:
        self._log.info("dataset.saved", path=path, total_cases=total_cases)
