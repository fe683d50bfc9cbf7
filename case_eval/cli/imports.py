"""Resolution of ``module:attribute`` references from the run config."""

import importlib
import sys
from pathlib import Path
from typing import Any

from case_eval.cli.errors import ImportReferenceError
from case_eval.evaluators.domain.evaluator import BaseEvaluator


def import_object(reference: str, search_path: Path | None = None) -> Any:
    """Import ``module`` and walk the dotted ``attribute`` path.

    ``search_path`` is prepended to ``sys.path`` when not already present so
    that modules next to the user's config are importable.

    Raises:
        ImportReferenceError: if the reference is malformed, the module cannot
            be imported, or the attribute does not exist.
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ImportReferenceError(reference=reference, reason="expected 'module:attribute'")

    if search_path is not None and str(search_path) not in sys.path:
        sys.path.insert(0, str(search_path))

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ImportReferenceError(reference=reference, reason=str(exc)) from exc

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ImportReferenceError(
                reference=reference, reason=f"no attribute '{part}'"
            ) from exc
    return target


def import_task(reference: str, search_path: Path | None = None) -> Any:
    task = import_object(reference, search_path)
    if not callable(task):
        raise ImportReferenceError(reference=reference, reason="task is not callable")
    return task


def import_evaluator_types[E: BaseEvaluator](
    references: list[str],
    base: type[E],
    search_path: Path | None = None,
) -> list[type[E]]:
    """Import evaluator classes, checking each subclasses ``base``.

    Raises:
        ImportReferenceError: if any reference fails to import or is not a subclass of ``base``.
    """
    types: list[type[E]] = []
    for reference in references:
        candidate = import_object(reference, search_path)
        if not (isinstance(candidate, type) and issubclass(candidate, base)):
            raise ImportReferenceError(
                reference=reference, reason=f"not a subclass of {base.__name__}"
            )
        types.append(candidate)
    return types
