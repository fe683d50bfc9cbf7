"""FakeDatasetObserver — records dataset domain events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LoadingStartedEvent:
    source: str
    fmt: str


@dataclass(frozen=True)
class CaseLoadedEvent:
    case_name: str


@dataclass(frozen=True)
class LoadingCompletedEvent:
    source: str
    total_cases: int


@dataclass(frozen=True)
class LoadingFailedEvent:
    source: str
    reason: str


@dataclass(frozen=True)
class SavedEvent:
    path: str
    total_cases: int


type DatasetEvent = (
    LoadingStartedEvent | CaseLoadedEvent | LoadingCompletedEvent | LoadingFailedEvent | SavedEvent
)


class FakeDatasetObserver:
    """Records every dataset event in order.

    Does NOT inherit from DatasetObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self.events: list[DatasetEvent] = []

    def dataset_loading_started(self, source: str, fmt: str) -> None:
        self.events.append(LoadingStartedEvent(source=source, fmt=fmt))

    def dataset_case_loaded(self, case_name: str) -> None:
        self.events.append(CaseLoadedEvent(case_name=case_name))

    def dataset_loading_completed(self, source: str, total_cases: int) -> None:
        self.events.append(LoadingCompletedEvent(source=source, total_cases=total_cases))

    def dataset_loading_failed(self, source: str, reason: str) -> None:
        self.events.append(LoadingFailedEvent(source=source, reason=reason))

    def dataset_saved(self, path: str, total_cases: int) -> None:
        self.events.append(SavedEvent(path=path, total_cases=total_cases))

    @property
    def cases_loaded(self) -> list[CaseLoadedEvent]:
        return [e for e in self.events if isinstance(e, CaseLoadedEvent)]

    @property
    def failures(self) -> list[LoadingFailedEvent]:
        return [e for e in self.events if isinstance(e, LoadingFailedEvent)]

    @property
    def completed(self) -> list[LoadingCompletedEvent]:
        return [e for e in self.events if isinstance(e, LoadingCompletedEvent)]
