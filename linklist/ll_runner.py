import logging

from core.steps import StepTag, StepTrace
from linklist.ll_model import LinkedListModel, ListKind

logger = logging.getLogger(__name__)


def pseudocode(kind: ListKind, operation: str):
    """Reference code shown next to the steps for ``operation``."""
    doubly = kind.is_doubly
    circular = kind.is_circular
    lines = []
    if operation == "insert_at_head":
        lines = ["node = Node(data)", "if head is None:", "    head = tail = node", "else:"]
        lines.append("    node.next = head")
        if doubly:
            lines.append("    head.prev = node")
        lines.append("    head = node")
    elif operation == "insert_at_tail":
        lines = ["node = Node(data)", "if head is None:", "    head = tail = node", "else:"]
        if kind is ListKind.SINGLY:
            lines += ["    last = head", "    while last.next:", "        last = last.next"]
        else:
            lines.append("    last = tail")
        lines.append("    last.next = node")
        if doubly:
            lines.append("    node.prev = last")
        lines.append("    tail = node")
    elif operation == "insert_after":
        lines = ["node = Node(data)", "A = target.next", "node.next = A"]
        if doubly:
            lines.append("node.prev = target")
        lines.append("target.next = node")
        if doubly:
            lines += ["if A:", "    A.prev = node"]
        lines += ["if target is tail:", "    tail = node"]
    elif operation == "insert_before":
        lines = [
            "if target is head:",
            "    return insert_at_head(data)",
            "node = Node(data)",
            "P = target.prev",
            "node.prev = P",
            "node.next = target",
            "P.next = node",
            "target.prev = node",
        ]
    elif operation == "delete":
        if doubly:
            lines = [
                "P = x.prev; N = x.next",
                "if P: P.next = N",
                "if N: N.prev = P",
                "if x is head: head = N",
                "if x is tail: tail = P",
            ]
        else:
            lines = [
                "if x is head:",
                "    head = x.next",
                "else:",
                "    P = head",
                "    while P.next is not x:",
                "        P = P.next",
                "    P.next = x.next",
                "    if x is tail: tail = P",
            ]
        lines.append("del x")
    elif operation == "reverse":
        lines = [
            "prev, current = None, head",
            "while current:",
            "    nxt = current.next",
            "    current.next = prev",
            "    prev, current = current, nxt",
            "head = prev",
        ]
    if circular and lines:
        lines.append("tail.next = head")
        if doubly:
            lines.append("head.prev = tail")
    return lines


class ListRunner:
    """
    Executes one list operation against the model and records a step for
    every mutation the model reports, followed by a closing step.
    """

    TITLES = {
        "insert_at_head": "Insert at Head",
        "insert_at_tail": "Insert at Tail",
        "insert_after": "Insert After",
        "insert_before": "Insert Before",
        "delete": "Delete Node",
        "reverse": "Reverse List",
    }

    def __init__(self, model: LinkedListModel):
        self.model = model

    def insert_at_head(self, value):
        return self._run("insert_at_head", self.model.iter_insert_at_head(value), "Insertion complete")

    def insert_at_tail(self, value):
        return self._run("insert_at_tail", self.model.iter_insert_at_tail(value), "Insertion complete")

    def insert_after(self, target_id, value):
        return self._run(
            "insert_after", self.model.iter_insert_after(target_id, value), "Insertion complete"
        )

    def insert_before(self, target_id, value):
        return self._run(
            "insert_before", self.model.iter_insert_before(target_id, value), "Insertion complete"
        )

    def delete(self, target_id):
        title = "Delete Sole Node" if self.model.length == 1 else "Delete Node"
        return self._run("delete", self.model.iter_delete(target_id), "Deletion complete", title)

    def reverse(self):
        return self._run("reverse", self.model.iter_reverse(), "Operation completed")

    def select(self, node_id):
        trace = StepTrace("Select Node")
        if node_id not in self.model:
            return None, trace
        name = f"node({self.model.value_of(node_id)})"
        snapshot = self.model.snapshot()
        actions = ["Insert After"]
        if self.model.supports("insert_before"):
            actions.append("Insert Before")
        actions.append("Delete")
        trace.add(f"User clicks {name}", StepTag.SELECT, snapshot, (node_id,))
        trace.add(f"Mark {name} as selected", StepTag.SELECT, snapshot, (node_id,))
        trace.add(f"Enable {', '.join(actions)}", StepTag.INFO, snapshot, (node_id,))
        trace.add("Ready for operation", StepTag.COMPLETE, snapshot, (node_id,))
        if self.model.kind.is_circular:
            trace.code = ["Circular properties:", "tail.next == head"]
            if self.model.kind.is_doubly:
                trace.code.append("head.prev == tail")
        return node_id, trace

    def initialize(self, values):
        """Build the list from ``values`` and narrate it as a single phase."""
        values = list(values)
        self.model.create_from_iterable(values)
        trace = StepTrace("Initialize")
        snapshot = self.model.snapshot()
        ids = tuple(self.model.ordered_ids())
        links = ".next/.prev" if self.model.kind.is_doubly else ".next"
        trace.add(
            f"Create nodes: {', '.join(str(v) for v in values) or 'none'}",
            StepTag.ALLOC,
            snapshot,
            ids,
        )
        trace.add(f"Set each {links} to its neighbour", StepTag.LINK, snapshot, ids)
        if self.model.kind.is_circular and ids:
            closure = f"Close the loop: tail({values[-1]}).next = head({values[0]})"
            if self.model.kind.is_doubly:
                closure += f", head({values[0]}).prev = tail({values[-1]})"
            trace.add(closure, StepTag.LINK, snapshot, (ids[-1], ids[0]))
        trace.add("Initialization complete", StepTag.COMPLETE, snapshot)
        return ids, trace

    def _run(self, operation, generator, closing, title=None):
        trace = StepTrace(title or self.TITLES[operation])
        trace.code = pseudocode(self.model.kind, operation)
        while True:
            try:
                mutation = next(generator)
            except StopIteration as stop:
                result = stop.value
                break
            trace.add(mutation.text, mutation.tag, self.model.snapshot(), mutation.focus)

        if len(trace) == 0:
            logger.debug("%s was a no-op on %s", operation, self.model.kind.label)
            return result, trace

        trace.add(closing, StepTag.COMPLETE, self.model.snapshot())
        logger.info("%s produced %d steps", trace.title, len(trace))
        return result, trace
