"""Observer port for the dataset domain — defines events in domain language."""

from typing import Protocol


class DatasetObserver(Protocol):
    def dataset_loading_started(self, source: str, fmt: str) -> None: ...

    def dataset_case_loaded(self, case_name: str) -> None: ...

    def dataset_loading_completed(self, source: str, total_cases: int) -> None: ...

    def dataset_loading_failed(self, source: str, reason: str) -> None: ...

    def dataset_saved(self, path: str, total_cases: int) -> None: ...
