"""ProgressEvaluationObserver — renders a Rich progress bar for an evaluation run to stderr."""

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.text import Text


class _CountsColumn(ProgressColumn):
    """Renders done+inflight/total with colors matching the bar segments."""

    def render(self, task: Task) -> Text:
        done = int(task.fields.get("done", 0))
        inflight = int(task.fields.get("inflight", 0))
        total = int(task.total or 0)
        return Text.assemble(
            (str(done), "bright_green"),
            ("+", "dim white"),
            (str(inflight), "grey50"),
            ("/", "dim white"),
            (str(total), "default"),
        )


class _ThreeSegmentBarColumn(ProgressColumn):
    """Bar with three segments: finished units, units in flight, units waiting."""

    def __init__(self, bar_width: int = 40) -> None:
        super().__init__()
        self.bar_width = bar_width

    def render(self, task: Task) -> Text:
        total = task.total or 0
        done_cells = 0
        inflight_cells = 0
        if total > 0:
            done_cells = int(task.completed / total * self.bar_width)
            inflight = int(task.fields.get("inflight", 0))
            inflight_cells = min(
                int(inflight / total * self.bar_width),
                self.bar_width - done_cells,
            )
        remaining_cells = self.bar_width - done_cells - inflight_cells

        result = Text()
        result.append("█" * done_cells, style="bright_green")
        result.append("▒" * inflight_cells, style="grey50")
        result.append("░" * remaining_cells, style="dim white")
        return result


class ProgressEvaluationObserver:
    """Shows one live bar per evaluation run on stderr.

    Only evaluation_started, unit_started, evaluation_progress and
    evaluation_completed change what is shown; the other events are no-ops.

    Pass ``disabled=True`` to track counts without any terminal output (useful in tests).

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._done = 0
        self._inflight = 0
        self._total = 0
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self._live: Live | None = None

    @property
    def done(self) -> int:
        return self._done

    @property
    def inflight(self) -> int:
        return self._inflight

    @property
    def total(self) -> int:
        return self._total

    def _refresh(self) -> None:
        if self._progress is None or self._task_id is None:
            return
        self._progress.update(
            self._task_id,
            completed=self._done,
            done=self._done,
            inflight=self._inflight,
        )

    def evaluation_started(
        self,
        run_name: str,
        total_cases: int,
        repeat: int,
        total_units: int,
        max_concurrency: int | None,
    ) -> None:
        self._done = 0
        self._inflight = 0
        self._total = total_units
        self._progress = None
        self._task_id = None
        self._live = None

        if self._disabled:
            return

        console = Console(stderr=True)
        self._progress = Progress(
            TextColumn("[bold]{task.description}[/bold]"),
            _ThreeSegmentBarColumn(bar_width=40),
            _CountsColumn(),
            TimeElapsedColumn(),
            TextColumn("eta"),
            TimeRemainingColumn(),
            console=console,
            refresh_per_second=10,
            transient=False,
        )
        self._task_id = self._progress.add_task(
            description=run_name,
            total=float(total_units),
            done=0,
            inflight=0,
        )
        legend = Text.assemble(
            "  Legend:  ",
            ("█", "bright_green"),
            " done  ",
            ("▒", "grey50"),
            " in-flight  ",
            ("░", "dim white"),
            " remaining",
        )
        self._live = Live(
            Group(self._progress, Text(""), legend),
            console=console,
            refresh_per_second=10,
        )
        self._live.start()

    def evaluation_progress(self, run_name: str, completed: int, total: int) -> None:
        self._done = completed
        self._inflight = max(0, self._inflight - 1)
        if not self._disabled:
            self._refresh()

    def evaluation_completed(
        self,
        run_name: str,
        total_cases: int,
        total_failures: int,
        elapsed_seconds: float,
    ) -> None:
        if self._live is not None:
            self._live.stop()
        self._progress = None
        self._task_id = None
        self._live = None

    def unit_started(
        self, run_name: str, case_name: str, source_case_name: str | None
    ) -> None:
        self._inflight += 1
        if not self._disabled:
            self._refresh()

    def unit_completed(
        self,
        run_name: str,
        case_name: str,
        task_duration: float,
        evaluator_failures: int,
    ) -> None:
        pass

    def unit_failed(self, run_name: str, case_name: str, reason: str) -> None:
        pass

    def evaluator_failed(
        self, run_name: str, case_name: str, evaluator_name: str, reason: str
    ) -> None:
        pass

    def report_evaluator_failed(
        self, run_name: str, evaluator_name: str, reason: str
    ) -> None:
        pass
