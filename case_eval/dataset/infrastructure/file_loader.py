"""YAML/JSON dataset files — load a Dataset from disk and write one back."""

import json
from collections.abc import Iterable, Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import ValidationError

from case_eval.core.errors import CaseEvalError
from case_eval.dataset.domain.case import Case
from case_eval.dataset.domain.dataset import Dataset
from case_eval.dataset.domain.observer import DatasetObserver
from case_eval.dataset.infrastructure.errors import (
    DatasetLoadError,
    UnsupportedDatasetFormatError,
)
from case_eval.dataset.infrastructure.schema import (
    CaseFileModel,
    DatasetFileModel,
    SerializedEvaluator,
)
from case_eval.evaluators.domain.evaluator import BaseEvaluator, Evaluator
from case_eval.evaluators.domain.report_evaluator import ReportEvaluator
from case_eval.evaluators.infrastructure.common import DEFAULT_EVALUATORS
from case_eval.evaluators.infrastructure.llm_judge import LLMJudge
from case_eval.evaluators.infrastructure.registry import build_registry, load_evaluator
from case_eval.evaluators.infrastructure.report_common import DEFAULT_REPORT_EVALUATORS
from case_eval.evaluators.infrastructure.spec import (
    deserialize_evaluator_spec,
    serialize_evaluator_spec,
)

type DatasetFormat = Literal["yaml", "json"]

_SUFFIX_FORMATS: dict[str, DatasetFormat] = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
}


def infer_format(path: Path, fmt: str | None = None) -> DatasetFormat:
    """Return ``fmt`` if given, otherwise the format implied by the file suffix.

    Raises:
        UnsupportedDatasetFormatError: if the format is unknown or cannot be inferred.
    """
    if fmt is not None:
        if fmt not in ("yaml", "json"):
            raise UnsupportedDatasetFormatError(fmt=fmt)
        return fmt
    inferred = _SUFFIX_FORMATS.get(path.suffix.lower())
    if inferred is None:
        raise UnsupportedDatasetFormatError(fmt=path.suffix or str(path))
    return inferred


class FileDatasetLoader:
    """Builds Dataset objects from YAML or JSON documents.

    Evaluators are resolved by serialization name: custom types first, then
    the built-ins.
    """

    def __init__(
        self,
        observer: DatasetObserver,
        custom_evaluator_types: Iterable[type[Evaluator]] = (),
        custom_report_evaluator_types: Iterable[type[ReportEvaluator]] = (),
    ) -> None:
        """
        Raises:
            DuplicateEvaluatorNameError: if two custom types share a name.
        """
        self._observer = observer
        self._evaluator_registry = build_registry(
            custom_types=custom_evaluator_types,
            default_types=(*DEFAULT_EVALUATORS, LLMJudge),
        )
        self._report_evaluator_registry = build_registry(
            custom_types=custom_report_evaluator_types,
            default_types=DEFAULT_REPORT_EVALUATORS,
        )

    def load(self, path: Path, fmt: str | None = None) -> Dataset:
        """Load a dataset file. The dataset name defaults to the file stem.

        Raises:
            DatasetLoadError: if the file is missing or its contents are invalid.
            UnsupportedDatasetFormatError: if the format cannot be determined.
        """
        resolved_fmt = infer_format(path=path, fmt=fmt)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            reason = f"file not found: {path}"
            self._observer.dataset_loading_failed(source=str(path), reason=reason)
            raise DatasetLoadError(reason=reason)
        return self.load_text(
            text=text, fmt=resolved_fmt, default_name=path.stem, source=str(path)
        )

    def load_text(
        self,
        text: str,
        fmt: DatasetFormat = "yaml",
        default_name: str | None = None,
        source: str = "<text>",
    ) -> Dataset:
        """Parse a dataset document held in memory.

        Raises:
            DatasetLoadError: if the text cannot be parsed or is invalid.
        """
        self._observer.dataset_loading_started(source=source, fmt=fmt)
        try:
            data = self._parse(text=text, fmt=fmt)
        except DatasetLoadError as exc:
            self._observer.dataset_loading_failed(source=source, reason=str(exc))
            raise
        return self._build(data=data, default_name=default_name, source=source)

    def load_dict(
        self,
        data: Mapping[str, Any],
        default_name: str | None = None,
        source: str = "<dict>",
    ) -> Dataset:
        """Build a dataset from an already-parsed document.

        Raises:
            DatasetLoadError: if the document does not match the dataset schema
                or names evaluators that cannot be loaded.
        """
        self._observer.dataset_loading_started(source=source, fmt="dict")
        return self._build(data=data, default_name=default_name, source=source)

    def _parse(self, text: str, fmt: DatasetFormat) -> Any:
        if fmt == "json":
            try:
                return json.loads(text)
            except json.JSONDecodeError as exc:
                raise DatasetLoadError(reason=f"invalid JSON: {exc}") from exc
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise DatasetLoadError(reason=f"invalid YAML: {exc}") from exc

    def _build(self, data: Any, default_name: str | None, source: str) -> Dataset:
        """Validate the document and resolve evaluators, collecting every error before raising."""
        try:
            model = DatasetFileModel.model_validate(data)
        except ValidationError as exc:
            reason = f"schema validation failed: {exc}"
            self._observer.dataset_loading_failed(source=source, reason=reason)
            raise DatasetLoadError(reason=reason) from exc

        errors: list[str] = []
        cases = [
            self._build_case(case_model, index, errors)
            for index, case_model in enumerate(model.cases)
        ]
        evaluators = self._load_all(
            self._evaluator_registry, model.evaluators, "dataset evaluators", errors
        )
        report_evaluators = self._load_all(
            self._report_evaluator_registry,
            model.report_evaluators,
            "report evaluators",
            errors,
        )

        names = [case.name for case in cases if case.name is not None]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        for name in duplicates:
            errors.append(f"duplicate case name '{name}'")

        if errors:
            reason = "; ".join(errors)
            self._observer.dataset_loading_failed(source=source, reason=reason)
            raise DatasetLoadError(reason=reason)

        dataset = Dataset(
            cases=cases,
            name=model.name if model.name is not None else default_name,
            evaluators=evaluators,
            report_evaluators=report_evaluators,
        )
        self._observer.dataset_loading_completed(source=source, total_cases=len(dataset))
        return dataset

    def _build_case(self, case_model: CaseFileModel, index: int, errors: list[str]) -> Case:
        label = case_model.name if case_model.name is not None else f"Case {index + 1}"
        case = Case(
            name=case_model.name,
            inputs=case_model.inputs,
            metadata=case_model.metadata,
            expected_output=case_model.expected_output,
            evaluators=self._load_all(
                self._evaluator_registry,
                case_model.evaluators,
                f"case '{label}'",
                errors,
            ),
        )
        self._observer.dataset_case_loaded(case_name=label)
        return case

    def _load_all[E: BaseEvaluator](
        self,
        registry: dict[str, type[E]],
        raw_specs: list[SerializedEvaluator],
        where: str,
        errors: list[str],
    ) -> list[E]:
        loaded: list[E] = []
        for raw in raw_specs:
            try:
                loaded.append(load_evaluator(registry, deserialize_evaluator_spec(raw)))
            except CaseEvalError as exc:
                errors.append(f"{where}: {exc}")
        return loaded


def _serialize_evaluator(evaluator: BaseEvaluator) -> SerializedEvaluator:
    spec = evaluator.as_spec()
    if isinstance(spec.arguments, tuple):
        spec = spec.model_copy(update={"arguments": tuple(_plain(v) for v in spec.arguments)})
    elif isinstance(spec.arguments, dict):
        spec = spec.model_copy(
            update={"arguments": {k: _plain(v) for k, v in spec.arguments.items()}}
        )
    return serialize_evaluator_spec(spec)


def _plain(value: Any) -> Any:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return value


def dataset_to_dict(dataset: Dataset) -> dict[str, Any]:
    """Return the file document for ``dataset``, omitting fields left at their defaults."""
    model = DatasetFileModel(
        name=dataset.name,
        cases=[
            CaseFileModel(
                name=case.name,
                inputs=case.inputs,
                metadata=case.metadata,
                expected_output=case.expected_output,
                evaluators=[_serialize_evaluator(e) for e in case.evaluators],
            )
            for case in dataset.cases
        ],
        evaluators=[_serialize_evaluator(e) for e in dataset.evaluators],
        report_evaluators=[_serialize_evaluator(e) for e in dataset.report_evaluators],
    )
    return model.model_dump(mode="json", by_alias=True, exclude_defaults=True)


def save_dataset(
    dataset: Dataset,
    path: Path,
    fmt: str | None = None,
    observer: DatasetObserver | None = None,
) -> None:
    """Write ``dataset`` to ``path`` as YAML or JSON.

    Raises:
        UnsupportedDatasetFormatError: if the format cannot be determined.
    """
    resolved_fmt = infer_format(path=path, fmt=fmt)
    document = dataset_to_dict(dataset)
    if resolved_fmt == "json":
        text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    else:
        text = yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    path.write_text(text, encoding="utf-8")
    if observer is not None:
        observer.dataset_saved(path=str(path), total_cases=len(dataset))
