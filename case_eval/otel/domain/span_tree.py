"""SpanNode and SpanTree — an in-memory hierarchy of finished spans with a query language."""

import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, TypedDict

type AttributeValue = (
    str | bool | int | float | Sequence[str] | Sequence[bool] | Sequence[int] | Sequence[float]
)


class SpanQuery(TypedDict, total=False):
    """Serializable query over span nodes. All present conditions must hold.

    Conditions are checked cheapest first: logical combinators, name, attributes,
    duration, then children, descendants and ancestors.
    """

    name_equals: str
    name_contains: str
    name_matches_regex: str

    has_attributes: dict[str, Any]
    has_attribute_keys: list[str]

    # Seconds when given as a number.
    min_duration: timedelta | float
    max_duration: timedelta | float

    not_: "SpanQuery"
    and_: list["SpanQuery"]
    or_: list["SpanQuery"]

    min_child_count: int
    max_child_count: int
    some_child_has: "SpanQuery"
    all_children_have: "SpanQuery"
    no_child_has: "SpanQuery"

    # Prunes descendant and ancestor walks at matching nodes.
    stop_recursing_when: "SpanQuery"

    min_descendant_count: int
    max_descendant_count: int
    some_descendant_has: "SpanQuery"
    all_descendants_have: "SpanQuery"
    no_descendant_has: "SpanQuery"

    # Depth is the ancestor count; roots have depth 0.
    min_depth: int
    max_depth: int
    some_ancestor_has: "SpanQuery"
    all_ancestors_have: "SpanQuery"
    no_ancestor_has: "SpanQuery"


type SpanPredicate = Callable[["SpanNode"], bool]


def _as_timedelta(value: timedelta | float) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=value)


@dataclass(repr=False, eq=False)
class SpanNode:
    """One finished span, linked to its parent and children once added to a SpanTree.

    Trace and span ids are lowercase hex strings.
    """

    name: str
    trace_id: str
    span_id: str
    parent_span_id: str | None
    start_timestamp: datetime
    end_timestamp: datetime
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    parent: "SpanNode | None" = field(default=None, init=False)
    children_by_key: dict[str, "SpanNode"] = field(default_factory=dict, init=False)

    @property
    def duration(self) -> timedelta:
        return self.end_timestamp - self.start_timestamp

    @property
    def node_key(self) -> str:
        return f"{self.trace_id}:{self.span_id}"

    @property
    def parent_node_key(self) -> str | None:
        if self.parent_span_id is None:
            return None
        return f"{self.trace_id}:{self.parent_span_id}"

    @property
    def children(self) -> list["SpanNode"]:
        return list(self.children_by_key.values())

    @property
    def descendants(self) -> list["SpanNode"]:
        return list(self._walk_descendants(stop_recursing_when=None))

    @property
    def ancestors(self) -> list["SpanNode"]:
        return list(self._walk_ancestors(stop_recursing_when=None))

    def add_child(self, child: "SpanNode") -> None:
        if child.trace_id != self.trace_id or child.parent_span_id != self.span_id:
            raise ValueError(
                f"span {child.node_key} is not a child of span {self.node_key}"
            )
        self.children_by_key[child.node_key] = child
        child.parent = self

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def find_children(self, predicate: SpanQuery | SpanPredicate) -> list["SpanNode"]:
        return [child for child in self.children if child.matches(predicate)]

    def first_child(self, predicate: SpanQuery | SpanPredicate) -> "SpanNode | None":
        return next((c for c in self.children if c.matches(predicate)), None)

    def any_child(self, predicate: SpanQuery | SpanPredicate) -> bool:
        return self.first_child(predicate) is not None

    def find_descendants(
        self,
        predicate: SpanQuery | SpanPredicate,
        stop_recursing_when: SpanQuery | SpanPredicate | None = None,
    ) -> list["SpanNode"]:
        return [
            node
            for node in self._walk_descendants(stop_recursing_when=stop_recursing_when)
            if node.matches(predicate)
        ]

    def first_descendant(
        self,
        predicate: SpanQuery | SpanPredicate,
        stop_recursing_when: SpanQuery | SpanPredicate | None = None,
    ) -> "SpanNode | None":
        return next(
            (
                node
                for node in self._walk_descendants(stop_recursing_when=stop_recursing_when)
                if node.matches(predicate)
            ),
            None,
        )

    def any_descendant(
        self,
        predicate: SpanQuery | SpanPredicate,
        stop_recursing_when: SpanQuery | SpanPredicate | None = None,
    ) -> bool:
        return self.first_descendant(predicate, stop_recursing_when) is not None

    def find_ancestors(
        self,
        predicate: SpanQuery | SpanPredicate,
        stop_recursing_when: SpanQuery | SpanPredicate | None = None,
    ) -> list["SpanNode"]:
        return [
            node
            for node in self._walk_ancestors(stop_recursing_when=stop_recursing_when)
            if node.matches(predicate)
        ]

    def first_ancestor(
        self,
        predicate: SpanQuery | SpanPredicate,
        stop_recursing_when: SpanQuery | SpanPredicate | None = None,
    ) -> "SpanNode | None":
        """Return the closest matching ancestor, or None."""
        return next(
            (
                node
                for node in self._walk_ancestors(stop_recursing_when=stop_recursing_when)
                if node.matches(predicate)
            ),
            None,
        )

    def any_ancestor(
        self,
        predicate: SpanQuery | SpanPredicate,
        stop_recursing_when: SpanQuery | SpanPredicate | None = None,
    ) -> bool:
        return self.first_ancestor(predicate, stop_recursing_when) is not None

    def _walk_descendants(
        self, stop_recursing_when: SpanQuery | SpanPredicate | None
    ) -> Iterator["SpanNode"]:
        """Depth-first, children in start order; a pruned node is yielded but not entered."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if stop_recursing_when is not None and node.matches(stop_recursing_when):
                continue
            stack.extend(reversed(node.children))

    def _walk_ancestors(
        self, stop_recursing_when: SpanQuery | SpanPredicate | None
    ) -> Iterator["SpanNode"]:
        node = self.parent
        while node is not None:
            yield node
            if stop_recursing_when is not None and node.matches(stop_recursing_when):
                return
            node = node.parent

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def matches(self, query: SpanQuery | SpanPredicate) -> bool:
        if callable(query):
            return query(self)
        return self._matches_query(query)

    def _matches_query(self, query: SpanQuery) -> bool:
        if "or_" in query:
            if len(query) > 1:
                raise ValueError(
                    "'or_' cannot be combined with other conditions at the same level"
                )
            return any(self._matches_query(q) for q in query["or_"])
        if "not_" in query and self._matches_query(query["not_"]):
            return False
        if "and_" in query and not all(self._matches_query(q) for q in query["and_"]):
            return False

        return (
            self._matches_name(query)
            and self._matches_attributes(query)
            and self._matches_duration(query)
            and self._matches_children(query)
            and self._matches_descendants(query)
            and self._matches_ancestors(query)
        )

    def _matches_name(self, query: SpanQuery) -> bool:
        if "name_equals" in query and self.name != query["name_equals"]:
            return False
        if "name_contains" in query and query["name_contains"] not in self.name:
            return False
        if "name_matches_regex" in query and not re.match(
            query["name_matches_regex"], self.name
        ):
            return False
        return True

    def _matches_attributes(self, query: SpanQuery) -> bool:
        expected = query.get("has_attributes", {})
        if any(self.attributes.get(key) != value for key, value in expected.items()):
            return False
        keys = query.get("has_attribute_keys", [])
        return all(key in self.attributes for key in keys)

    def _matches_duration(self, query: SpanQuery) -> bool:
        if "min_duration" in query and self.duration < _as_timedelta(query["min_duration"]):
            return False
        if "max_duration" in query and self.duration > _as_timedelta(query["max_duration"]):
            return False
        return True

    def _matches_children(self, query: SpanQuery) -> bool:
        children = self.children
        if "min_child_count" in query and len(children) < query["min_child_count"]:
            return False
        if "max_child_count" in query and len(children) > query["max_child_count"]:
            return False
        return _matches_related(children, query, "some_child_has", "all_children_have", "no_child_has")

    def _matches_descendants(self, query: SpanQuery) -> bool:
        stop = query.get("stop_recursing_when")
        if "min_descendant_count" in query or "max_descendant_count" in query:
            count = len(self.descendants)
            if count < query.get("min_descendant_count", 0):
                return False
            if "max_descendant_count" in query and count > query["max_descendant_count"]:
                return False
        if not any(
            key in query
            for key in ("some_descendant_has", "all_descendants_have", "no_descendant_has")
        ):
            return True
        pruned = list(self._walk_descendants(stop_recursing_when=stop))
        return _matches_related(
            pruned, query, "some_descendant_has", "all_descendants_have", "no_descendant_has"
        )

    def _matches_ancestors(self, query: SpanQuery) -> bool:
        stop = query.get("stop_recursing_when")
        if "min_depth" in query or "max_depth" in query:
            depth = len(self.ancestors)
            if depth < query.get("min_depth", 0):
                return False
            if "max_depth" in query and depth > query["max_depth"]:
                return False
        if not any(
            key in query
            for key in ("some_ancestor_has", "all_ancestors_have", "no_ancestor_has")
        ):
            return True
        pruned = list(self._walk_ancestors(stop_recursing_when=stop))
        return _matches_related(
            pruned, query, "some_ancestor_has", "all_ancestors_have", "no_ancestor_has"
        )

    def __repr__(self) -> str:
        return f"SpanNode(name={self.name!r}, span_id={self.span_id!r}, children={len(self.children_by_key)})"


def _matches_related(
    nodes: list[SpanNode],
    query: SpanQuery,
    some_key: str,
    all_key: str,
    none_key: str,
) -> bool:
    """Apply the some/all/no conditions stored under the given keys to related nodes."""
    some = query.get(some_key)
    if some is not None and not any(node._matches_query(some) for node in nodes):
        return False
    every = query.get(all_key)
    if every is not None and not all(node._matches_query(every) for node in nodes):
        return False
    none = query.get(none_key)
    if none is not None and any(node._matches_query(none) for node in nodes):
        return False
    return True


@dataclass(repr=False)
class SpanTree:
    """Hierarchy of SpanNodes built from a flat list of finished spans.

    A node whose parent is not in the tree is a root. Nodes are kept in start
    order so that roots and children come out in the order they began.
    """

    roots: list[SpanNode] = field(default_factory=list)
    nodes_by_key: dict[str, SpanNode] = field(default_factory=dict)

    def add_spans(self, spans: list[SpanNode]) -> None:
        for span in spans:
            self.nodes_by_key[span.node_key] = span
        self._rebuild()

    def _rebuild(self) -> None:
        nodes = sorted(self.nodes_by_key.values(), key=lambda n: n.start_timestamp)
        self.nodes_by_key = {node.node_key: node for node in nodes}
        for node in nodes:
            node.children_by_key = {}
            node.parent = None

        self.roots = []
        for node in nodes:
            parent_key = node.parent_node_key
            parent = self.nodes_by_key.get(parent_key) if parent_key else None
            if parent is None:
                self.roots.append(node)
            else:
                parent.add_child(node)

    def find(self, predicate: SpanQuery | SpanPredicate) -> list[SpanNode]:
        return [node for node in self if node.matches(predicate)]

    def first(self, predicate: SpanQuery | SpanPredicate) -> SpanNode | None:
        return next((node for node in self if node.matches(predicate)), None)

    def any(self, predicate: SpanQuery | SpanPredicate) -> bool:
        return self.first(predicate) is not None

    def __iter__(self) -> Iterator[SpanNode]:
        return iter(self.nodes_by_key.values())

    def __len__(self) -> int:
        return len(self.nodes_by_key)

    def __repr__(self) -> str:
        return f"SpanTree(roots={len(self.roots)}, spans={len(self.nodes_by_key)})"
