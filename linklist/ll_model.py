import itertools
from collections import namedtuple
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from core.steps import StepTag


class ListKind(str, Enum):
    SINGLY = "singly"
    DOUBLY = "doubly"
    CIRCULAR_SINGLY = "circular_singly"
    CIRCULAR_DOUBLY = "circular_doubly"

    @property
    def is_doubly(self) -> bool:
        return self in (ListKind.DOUBLY, ListKind.CIRCULAR_DOUBLY)

    @property
    def is_circular(self) -> bool:
        return self in (ListKind.CIRCULAR_SINGLY, ListKind.CIRCULAR_DOUBLY)

    @property
    def label(self) -> str:
        return {
            ListKind.SINGLY: "Singly Linked List",
            ListKind.DOUBLY: "Doubly Linked List",
            ListKind.CIRCULAR_SINGLY: "Circular Singly Linked List",
            ListKind.CIRCULAR_DOUBLY: "Circular Doubly Linked List",
        }[self]


_COMMON_OPS = frozenset({"insert_at_head", "insert_at_tail", "insert_after", "delete"})

SUPPORTED_OPERATIONS = {
    ListKind.SINGLY: _COMMON_OPS | {"reverse"},
    ListKind.DOUBLY: _COMMON_OPS | {"insert_before"},
    ListKind.CIRCULAR_SINGLY: _COMMON_OPS,
    ListKind.CIRCULAR_DOUBLY: _COMMON_OPS | {"insert_before"},
}


class UnsupportedOperation(Exception):
    """Operation is not defined for this list kind."""


class ListIntegrityError(Exception):
    """Raised by ``validate`` when a structural invariant does not hold."""


# One elementary change (allocation, relink, release) or observation.
Mutation = namedtuple("Mutation", ["tag", "text", "focus"])

NodeView = namedtuple("NodeView", ["id", "value", "next", "prev"])


@dataclass(frozen=True)
class ListSnapshot:
    kind: ListKind
    nodes: Tuple[NodeView, ...]
    head: Optional[int]
    tail: Optional[int]

    def values(self) -> List[int]:
        return [node.value for node in self.nodes]

    def ids(self) -> List[int]:
        return [node.id for node in self.nodes]

    def find(self, node_id) -> Optional[NodeView]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


def drain(generator):
    """Run a mutation generator to completion and return its result."""
    while True:
        try:
            next(generator)
        except StopIteration as stop:
            return stop.value


class LinkedListModel:
    """
    Linked list model for all four variants, kept as plain dictionaries
    (no Qt objects). Links are node ids; ``head``/``tail`` point into
    ``nodes``.

    Every structural operation exists twice: ``iter_<op>`` yields one
    ``Mutation`` per elementary change and returns the result, ``<op>``
    runs it silently.
    """

    def __init__(self, kind=ListKind.SINGLY):
        self.kind = ListKind(kind)
        self._id_iter = itertools.count(1)
        self.head: Optional[int] = None
        self.tail: Optional[int] = None
        self.nodes: Dict[int, Dict] = {}
        self.length = 0

    @property
    def size(self) -> int:
        return self.length

    def supports(self, operation: str) -> bool:
        return operation in SUPPORTED_OPERATIONS[self.kind]

    def __contains__(self, node_id):
        return node_id in self.nodes

    def value_of(self, node_id):
        node = self.nodes.get(node_id)
        return None if node is None else node["value"]

    # ---------- Plain operations ----------

    def insert_at_head(self, value):
        return drain(self.iter_insert_at_head(value))

    def insert_at_tail(self, value):
        return drain(self.iter_insert_at_tail(value))

    def insert_after(self, target_id, value):
        return drain(self.iter_insert_after(target_id, value))

    def insert_before(self, target_id, value):
        return drain(self.iter_insert_before(target_id, value))

    def delete(self, target_id) -> bool:
        return drain(self.iter_delete(target_id))

    def reverse(self) -> bool:
        return drain(self.iter_reverse())

    def clear(self):
        self.head = None
        self.tail = None
        self.nodes.clear()
        self.length = 0
        self._id_iter = itertools.count(1)

    def create_from_iterable(self, values):
        self.clear()
        for value in values:
            self.insert_at_tail(value)

    # ---------- Stepwise operations ----------

    def iter_insert_at_head(self, value) -> Iterator[Mutation]:
        self._require("insert_at_head")
        new_id = self._new_node(value)
        yield Mutation(StepTag.ALLOC, f"Create new node with value {value}", (new_id,))

        if self.head is None:
            yield from self._iter_first_node(new_id)
            return new_id

        old_head = self.head
        self.nodes[new_id]["next"] = old_head
        yield Mutation(
            StepTag.LINK,
            f"Set {self._name(new_id, 'new')}.next = {self._name(old_head, 'head')}",
            (new_id, old_head),
        )
        if self.kind.is_doubly:
            self.nodes[old_head]["prev"] = new_id
            yield Mutation(
                StepTag.LINK,
                f"Set {self._name(old_head, 'head')}.prev = {self._name(new_id, 'new')}",
                (old_head, new_id),
            )
        self.head = new_id
        yield Mutation(StepTag.LINK, f"Update head to {self._name(new_id, 'new')}", (new_id,))
        self.length += 1
        yield from self._iter_close_loop()
        return new_id

    def iter_insert_at_tail(self, value) -> Iterator[Mutation]:
        self._require("insert_at_tail")
        new_id = self._new_node(value)
        yield Mutation(StepTag.ALLOC, f"Create new node with value {value}", (new_id,))

        if self.head is None:
            yield from self._iter_first_node(new_id)
            return new_id

        if self.kind is ListKind.SINGLY:
            last = self._find_last()
            yield Mutation(
                StepTag.INFO,
                f"Traverse to the last node: {self._name(last)}",
                (last,),
            )
        else:
            last = self.tail

        self.nodes[last]["next"] = new_id
        yield Mutation(
            StepTag.LINK,
            f"Set {self._name(last, 'tail')}.next = {self._name(new_id, 'new')}",
            (last, new_id),
        )
        if self.kind.is_doubly:
            self.nodes[new_id]["prev"] = last
            yield Mutation(
                StepTag.LINK,
                f"Set {self._name(new_id, 'new')}.prev = {self._name(last, 'tail')}",
                (new_id, last),
            )
        self.tail = new_id
        yield Mutation(StepTag.LINK, f"Update tail to {self._name(new_id, 'new')}", (new_id,))
        self.length += 1
        yield from self._iter_close_loop()
        return new_id

    def iter_insert_after(self, target_id, value) -> Iterator[Mutation]:
        self._require("insert_after")
        if target_id not in self.nodes:
            return None

        successor = self.nodes[target_id]["next"]
        new_id = self._new_node(value)
        yield Mutation(StepTag.ALLOC, f"Create new node with value {value}", (new_id,))
        yield Mutation(
            StepTag.INFO,
            f"Let A = {self._name(target_id, 'target')}.next = {self._name(successor, 'A')}",
            (target_id,) if successor is None else (target_id, successor),
        )

        self.nodes[new_id]["next"] = successor
        yield Mutation(
            StepTag.LINK,
            f"Set {self._name(new_id, 'new')}.next = {self._name(successor, 'A')}",
            (new_id,) if successor is None else (new_id, successor),
        )
        if self.kind.is_doubly:
            self.nodes[new_id]["prev"] = target_id
            yield Mutation(
                StepTag.LINK,
                f"Set {self._name(new_id, 'new')}.prev = {self._name(target_id, 'target')}",
                (new_id, target_id),
            )
        self.nodes[target_id]["next"] = new_id
        yield Mutation(
            StepTag.LINK,
            f"Set {self._name(target_id, 'target')}.next = {self._name(new_id, 'new')}",
            (target_id, new_id),
        )
        if self.kind.is_doubly and successor is not None:
            self.nodes[successor]["prev"] = new_id
            yield Mutation(
                StepTag.LINK,
                f"Set {self._name(successor, 'A')}.prev = {self._name(new_id, 'new')}",
                (successor, new_id),
            )
        if target_id == self.tail:
            self.tail = new_id
            yield Mutation(StepTag.LINK, f"Update tail to {self._name(new_id, 'new')}", (new_id,))
        self.length += 1
        yield from self._iter_close_loop()
        return new_id

    def iter_insert_before(self, target_id, value) -> Iterator[Mutation]:
        self._require("insert_before")
        if target_id not in self.nodes:
            return None
        if target_id == self.head:
            return (yield from self.iter_insert_at_head(value))

        predecessor = self.nodes[target_id]["prev"]
        new_id = self._new_node(value)
        yield Mutation(StepTag.ALLOC, f"Create new node with value {value}", (new_id,))
        yield Mutation(
            StepTag.INFO,
            f"Let P = {self._name(target_id, 'target')}.prev = {self._name(predecessor, 'P')}",
            (target_id, predecessor),
        )

        self.nodes[new_id]["prev"] = predecessor
        yield Mutation(
            StepTag.LINK,
            f"Set {self._name(new_id, 'new')}.prev = {self._name(predecessor, 'P')}",
            (new_id, predecessor),
        )
        self.nodes[new_id]["next"] = target_id
        yield Mutation(
            StepTag.LINK,
            f"Set {self._name(new_id, 'new')}.next = {self._name(target_id, 'target')}",
            (new_id, target_id),
        )
        self.nodes[predecessor]["next"] = new_id
        yield Mutation(
            StepTag.LINK,
            f"Set {self._name(predecessor, 'P')}.next = {self._name(new_id, 'new')}",
            (predecessor, new_id),
        )
        self.nodes[target_id]["prev"] = new_id
        yield Mutation(
            StepTag.LINK,
            f"Set {self._name(target_id, 'target')}.prev = {self._name(new_id, 'new')}",
            (target_id, new_id),
        )
        self.length += 1
        yield from self._iter_close_loop()
        return new_id

    def iter_delete(self, target_id) -> Iterator[Mutation]:
        self._require("delete")
        if target_id not in self.nodes:
            return False

        name = self._name(target_id, "X")
        if self.length == 1:
            yield Mutation(StepTag.INFO, f"{name} is the only node", (target_id,))
            self.head = None
            self.tail = None
            yield Mutation(StepTag.LINK, "Set head = tail = null", (target_id,))
            del self.nodes[target_id]
            self.length = 0
            yield Mutation(StepTag.ALLOC, f"Remove {name}; list becomes empty", ())
            return True

        node = self.nodes[target_id]
        successor = node["next"]
        if self.kind.is_doubly:
            predecessor = node["prev"]
            yield Mutation(
                StepTag.INFO,
                f"Let P = {name}.prev = {self._name(predecessor, 'P')}, "
                f"N = {name}.next = {self._name(successor, 'N')}",
                tuple(i for i in (predecessor, target_id, successor) if i is not None),
            )
            if predecessor is not None:
                self.nodes[predecessor]["next"] = successor
                yield Mutation(
                    StepTag.LINK,
                    f"Set {self._name(predecessor, 'P')}.next = {self._name(successor, 'N')}",
                    (predecessor,),
                )
            if successor is not None:
                self.nodes[successor]["prev"] = predecessor
                yield Mutation(
                    StepTag.LINK,
                    f"Set {self._name(successor, 'N')}.prev = {self._name(predecessor, 'P')}",
                    (successor,),
                )
        elif target_id == self.head:
            predecessor = self.tail if self.kind.is_circular else None
        else:
            predecessor = self._find_predecessor(target_id)
            yield Mutation(
                StepTag.INFO,
                f"Find previous node: {self._name(predecessor, 'P')}",
                (predecessor, target_id),
            )
            self.nodes[predecessor]["next"] = successor
            yield Mutation(
                StepTag.LINK,
                f"Set {self._name(predecessor, 'P')}.next = {self._name(successor, 'N')}",
                (predecessor,),
            )

        if target_id == self.head:
            self.head = successor
            yield Mutation(
                StepTag.LINK,
                f"{name} is head: set head = {self._name(successor, 'N')}",
                (successor,),
            )
        if target_id == self.tail:
            self.tail = predecessor
            yield Mutation(
                StepTag.LINK,
                f"{name} is tail: set tail = {self._name(predecessor, 'P')}",
                (predecessor,),
            )

        del self.nodes[target_id]
        self.length -= 1
        yield Mutation(StepTag.ALLOC, f"Remove {name} from memory", ())
        yield from self._iter_close_loop()
        return True

    def iter_reverse(self) -> Iterator[Mutation]:
        self._require("reverse")
        if self.length < 2:
            return False

        old_head = self.head
        previous = None
        current = self.head
        yield Mutation(
            StepTag.INFO,
            f"Initialize: prev = null, current = {self._name(current, 'head')}",
            (current,),
        )
        while current is not None:
            following = self.nodes[current]["next"]
            self.nodes[current]["next"] = previous
            yield Mutation(
                StepTag.LINK,
                f"Reverse: {self._name(current)}.next = {self._name(previous)}",
                (current,) if previous is None else (current, previous),
            )
            previous, current = current, following

        self.head = previous
        yield Mutation(StepTag.LINK, f"Set head = prev = {self._name(previous)}", (previous,))
        self.tail = old_head
        yield Mutation(StepTag.LINK, f"Set tail = {self._name(old_head)}", (old_head,))
        return True

    # ---------- Queries ----------

    def to_ordered_sequence(self) -> List[int]:
        return [self.nodes[node_id]["value"] for node_id in self._walk()]

    def ordered_ids(self) -> List[int]:
        return list(self._walk())

    def snapshot(self) -> ListSnapshot:
        """
        Forward order from head, followed by nodes that are allocated but
        not reachable yet (mid-operation).
        """
        ordered = list(self._walk())
        seen = set(ordered)
        ordered.extend(node_id for node_id in sorted(self.nodes) if node_id not in seen)
        views = tuple(
            NodeView(
                node_id,
                self.nodes[node_id]["value"],
                self.nodes[node_id]["next"],
                self.nodes[node_id]["prev"],
            )
            for node_id in ordered
        )
        return ListSnapshot(self.kind, views, self.head, self.tail)

    def validate(self):
        """Raise ``ListIntegrityError`` unless every structural invariant holds."""
        if self.length == 0:
            if self.head is not None or self.tail is not None or self.nodes:
                raise ListIntegrityError("empty list must have no head, tail or nodes")
            return

        ids = list(self._walk())
        if len(ids) != self.length or len(self.nodes) != self.length:
            raise ListIntegrityError(
                f"size {self.length} but {len(ids)} reachable and {len(self.nodes)} stored"
            )
        if ids[-1] != self.tail:
            raise ListIntegrityError("tail is not the last reachable node")

        closure = self.head if self.kind.is_circular else None
        if self.nodes[self.tail]["next"] != closure:
            raise ListIntegrityError("tail.next does not close the list correctly")

        if self.kind.is_doubly:
            back = self.tail if self.kind.is_circular else None
            if self.nodes[self.head]["prev"] != back:
                raise ListIntegrityError("head.prev is wrong")
            for left, right in zip(ids, ids[1:]):
                if self.nodes[right]["prev"] != left:
                    raise ListIntegrityError(f"prev/next mismatch between {left} and {right}")

    # ---------- Helpers ----------

    def _require(self, operation: str):
        if not self.supports(operation):
            raise UnsupportedOperation(f"{operation} is not available for {self.kind.label}")

    def _new_node(self, value) -> int:
        node_id = next(self._id_iter)
        self.nodes[node_id] = {"id": node_id, "value": value, "next": None, "prev": None}
        return node_id

    def _name(self, node_id, role: str = "node") -> str:
        if node_id is None:
            return "null"
        return f"{role}({self.nodes[node_id]['value']})"

    def _iter_first_node(self, node_id):
        self.head = node_id
        self.tail = node_id
        self.length = 1
        yield Mutation(
            StepTag.LINK,
            f"List is empty, set head = tail = {self._name(node_id, 'new')}",
            (node_id,),
        )
        yield from self._iter_close_loop()

    def _iter_close_loop(self):
        """Re-derive the circular closure after a structural change."""
        if not self.kind.is_circular or self.head is None:
            return
        self.nodes[self.tail]["next"] = self.head
        yield Mutation(
            StepTag.LINK,
            f"Maintain circular closure: {self._name(self.tail, 'tail')}.next = "
            f"{self._name(self.head, 'head')}",
            (self.tail, self.head),
        )
        if self.kind.is_doubly:
            self.nodes[self.head]["prev"] = self.tail
            yield Mutation(
                StepTag.LINK,
                f"Maintain circular closure: {self._name(self.head, 'head')}.prev = "
                f"{self._name(self.tail, 'tail')}",
                (self.head, self.tail),
            )

    def _walk(self):
        current = self.head
        visited = set()
        while current is not None and current not in visited:
            visited.add(current)
            yield current
            current = self.nodes[current]["next"]
            if current == self.head:
                break

    def _find_last(self) -> int:
        last = self.head
        while self.nodes[last]["next"] is not None:
            last = self.nodes[last]["next"]
        return last

    def _find_predecessor(self, target_id) -> Optional[int]:
        current = self.head
        while current is not None and self.nodes[current]["next"] != target_id:
            current = self.nodes[current]["next"]
            if current == self.head:
                return None
        return current
