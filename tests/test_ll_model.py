"""
Tests for the linked list model: structural invariants for every list kind,
mutation reporting and no-op behaviour on stale ids.
"""

import random

import pytest

from core.steps import StepTag
from linklist.ll_model import (
    LinkedListModel,
    ListIntegrityError,
    ListKind,
    UnsupportedOperation,
)


def assert_circular_doubly_invariants(model: LinkedListModel) -> None:
    if model.size == 0:
        assert model.head is None and model.tail is None
        return
    assert model.nodes[model.head]["prev"] == model.tail
    assert model.nodes[model.tail]["next"] == model.head
    assert len(model.ordered_ids()) == model.size


class TestBuild:
    """Construction and plain queries."""

    def test_create_from_iterable(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [10, 20, 30])
        assert model.to_ordered_sequence() == [10, 20, 30]
        assert model.size == 3
        assert model.ordered_ids() == [1, 2, 3]
        model.validate()

    def test_clear_restarts_ids(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [1, 2])
        model.clear()
        assert model.size == 0
        assert model.head is None and model.tail is None
        assert model.insert_at_tail(7) == 1

    def test_first_node_closes_on_itself(self) -> None:
        model = LinkedListModel(ListKind.CIRCULAR_DOUBLY)
        node_id = model.insert_at_head(5)
        assert model.head == model.tail == node_id
        assert model.nodes[node_id]["next"] == node_id
        assert model.nodes[node_id]["prev"] == node_id
        model.validate()

    def test_linear_tail_points_to_nothing(self, make_list) -> None:
        model = make_list(ListKind.DOUBLY, [1, 2, 3])
        assert model.nodes[model.tail]["next"] is None
        assert model.nodes[model.head]["prev"] is None

    def test_supported_operations(self) -> None:
        assert LinkedListModel(ListKind.SINGLY).supports("reverse")
        assert not LinkedListModel(ListKind.SINGLY).supports("insert_before")
        assert LinkedListModel(ListKind.DOUBLY).supports("insert_before")
        assert not LinkedListModel(ListKind.CIRCULAR_SINGLY).supports("reverse")
        assert LinkedListModel(ListKind.CIRCULAR_DOUBLY).supports("insert_before")


class TestInsert:
    """Head, tail, after and before insertion."""

    def test_insert_at_head(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [2, 3])
        new_id = model.insert_at_head(1)
        assert model.head == new_id
        assert model.to_ordered_sequence() == [1, 2, 3]
        model.validate()

    def test_insert_at_tail(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [1, 2])
        new_id = model.insert_at_tail(3)
        assert model.tail == new_id
        assert model.to_ordered_sequence() == [1, 2, 3]
        model.validate()

    def test_insert_after_middle(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [10, 20, 30])
        model.insert_after(2, 25)
        assert model.to_ordered_sequence() == [10, 20, 25, 30]
        model.validate()

    def test_insert_after_tail_moves_tail(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [10, 20])
        new_id = model.insert_after(2, 30)
        assert model.tail == new_id
        assert model.to_ordered_sequence() == [10, 20, 30]
        model.validate()

    def test_circular_singly_insert_after(self, make_list) -> None:
        """[10, 20, 30, 50] with 99 after 20 keeps tail(50).next == head(10)."""
        model = make_list(ListKind.CIRCULAR_SINGLY, [10, 20, 30, 50])
        model.insert_after(2, 99)
        assert model.to_ordered_sequence() == [10, 20, 99, 30, 50]
        assert model.value_of(model.tail) == 50
        assert model.nodes[model.tail]["next"] == model.head
        assert model.value_of(model.head) == 10

    @pytest.mark.parametrize("kind", [ListKind.DOUBLY, ListKind.CIRCULAR_DOUBLY])
    def test_insert_before_middle(self, kind, make_list) -> None:
        model = make_list(kind, [10, 20, 30])
        model.insert_before(2, 15)
        assert model.to_ordered_sequence() == [10, 15, 20, 30]
        model.validate()

    @pytest.mark.parametrize("kind", [ListKind.DOUBLY, ListKind.CIRCULAR_DOUBLY])
    def test_insert_before_head_becomes_head(self, kind, make_list) -> None:
        model = make_list(kind, [10, 20])
        new_id = model.insert_before(1, 5)
        assert model.head == new_id
        assert model.to_ordered_sequence() == [5, 10, 20]
        model.validate()

    def test_unknown_target_is_noop(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [1, 2])
        before = model.snapshot()
        assert model.insert_after(99, 5) is None
        assert list(model.iter_insert_after(99, 5)) == []
        assert model.snapshot() == before

    def test_unsupported_operation_raises(self, make_list) -> None:
        model = make_list(ListKind.SINGLY, [1, 2])
        with pytest.raises(UnsupportedOperation):
            model.insert_before(2, 5)
        with pytest.raises(UnsupportedOperation):
            make_list(ListKind.DOUBLY, [1, 2]).reverse()


class TestDelete:
    """Deletion of head, tail, middle and the sole node."""

    def test_delete_sole_node(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [42])
        assert model.delete(1) is True
        assert model.size == 0
        assert model.head is None
        assert model.tail is None
        assert model.nodes == {}
        model.validate()

    def test_delete_head(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [1, 2, 3])
        model.delete(1)
        assert model.to_ordered_sequence() == [2, 3]
        assert model.head == 2
        model.validate()

    def test_delete_tail(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [1, 2, 3])
        model.delete(3)
        assert model.to_ordered_sequence() == [1, 2]
        assert model.tail == 2
        model.validate()

    def test_delete_middle(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [1, 2, 3])
        model.delete(2)
        assert model.to_ordered_sequence() == [1, 3]
        model.validate()

    def test_delete_unknown_is_noop(self, any_kind, make_list) -> None:
        model = make_list(any_kind, [1, 2])
        assert model.delete(17) is False
        assert model.to_ordered_sequence() == [1, 2]

    def test_delete_on_empty_is_noop(self, any_kind) -> None:
        model = LinkedListModel(any_kind)
        assert model.delete(1) is False
        assert model.size == 0

    def test_singly_delete_reports_predecessor_search(self, make_list) -> None:
        model = make_list(ListKind.SINGLY, [1, 2, 3])
        texts = [m.text for m in model.iter_delete(3)]
        assert texts[0] == "Find previous node: P(2)"
        assert "X(3) is tail: set tail = P(2)" in texts


class TestReverse:
    """In-place reversal of the linear singly list."""

    def test_reverse(self, make_list) -> None:
        model = make_list(ListKind.SINGLY, [1, 2, 3, 4])
        assert model.reverse() is True
        assert model.to_ordered_sequence() == [4, 3, 2, 1]
        assert model.head == 4
        assert model.tail == 1
        model.validate()

    def test_reverse_short_list_is_noop(self, make_list) -> None:
        model = make_list(ListKind.SINGLY, [1])
        assert list(model.iter_reverse()) == []
        assert model.reverse() is False
        assert model.to_ordered_sequence() == [1]

    def test_reverse_twice_restores_order(self, make_list) -> None:
        model = make_list(ListKind.SINGLY, [5, 6, 7])
        model.reverse()
        model.reverse()
        assert model.to_ordered_sequence() == [5, 6, 7]


class TestMutations:
    """One Mutation per elementary change."""

    def test_insert_after_mutations(self, make_list) -> None:
        model = make_list(ListKind.CIRCULAR_SINGLY, [10, 20, 30, 50])
        mutations = list(model.iter_insert_after(2, 99))
        assert [m.text for m in mutations] == [
            "Create new node with value 99",
            "Let A = target(20).next = A(30)",
            "Set new(99).next = A(30)",
            "Set target(20).next = new(99)",
            "Maintain circular closure: tail(50).next = head(10)",
        ]
        assert [m.tag for m in mutations] == [
            StepTag.ALLOC,
            StepTag.INFO,
            StepTag.LINK,
            StepTag.LINK,
            StepTag.LINK,
        ]

    def test_doubly_insert_after_relinks_successor(self, make_list) -> None:
        model = make_list(ListKind.DOUBLY, [10, 20, 30])
        texts = [m.text for m in model.iter_insert_after(2, 25)]
        assert "Set new(25).prev = target(20)" in texts
        assert "Set A(30).prev = new(25)" in texts

    def test_snapshot_shows_unlinked_node(self, make_list) -> None:
        model = make_list(ListKind.SINGLY, [10, 20])
        generator = model.iter_insert_after(1, 15)
        first = next(generator)
        assert first.tag is StepTag.ALLOC
        snapshot = model.snapshot()
        assert snapshot.ids() == [1, 2, 3]
        assert snapshot.find(3).next is None
        assert model.to_ordered_sequence() == [10, 20]

    def test_plain_and_stepwise_agree(self, any_kind, make_list) -> None:
        plain = make_list(any_kind, [1, 2, 3])
        stepwise = make_list(any_kind, [1, 2, 3])
        plain.insert_after(2, 9)
        list(stepwise.iter_insert_after(2, 9))
        assert plain.snapshot() == stepwise.snapshot()


class TestIntegrity:
    """validate() and randomized invariant checks."""

    def test_validate_detects_broken_closure(self, make_list) -> None:
        model = make_list(ListKind.CIRCULAR_SINGLY, [1, 2, 3])
        model.nodes[model.tail]["next"] = None
        with pytest.raises(ListIntegrityError):
            model.validate()

    def test_validate_detects_prev_mismatch(self, make_list) -> None:
        model = make_list(ListKind.DOUBLY, [1, 2, 3])
        model.nodes[3]["prev"] = 1
        with pytest.raises(ListIntegrityError):
            model.validate()

    @pytest.mark.parametrize("seed", range(5))
    def test_circular_doubly_random_operations(self, seed) -> None:
        """head.prev == tail and tail.next == head after every insert/delete."""
        rng = random.Random(seed)
        model = LinkedListModel(ListKind.CIRCULAR_DOUBLY)
        for _ in range(200):
            ids = list(model.nodes)
            choice = rng.choice(["head", "tail", "after", "before", "delete", "delete"])
            value = rng.randint(0, 99)
            if choice == "head":
                model.insert_at_head(value)
            elif choice == "tail":
                model.insert_at_tail(value)
            elif choice == "after" and ids:
                model.insert_after(rng.choice(ids), value)
            elif choice == "before" and ids:
                model.insert_before(rng.choice(ids), value)
            elif choice == "delete" and ids:
                model.delete(rng.choice(ids))
            assert_circular_doubly_invariants(model)
            model.validate()

    @pytest.mark.parametrize("kind", [ListKind.SINGLY, ListKind.CIRCULAR_SINGLY])
    def test_singly_random_operations(self, kind) -> None:
        rng = random.Random(7)
        model = LinkedListModel(kind)
        expected = []
        for _ in range(150):
            ids = model.ordered_ids()
            if ids and rng.random() < 0.4:
                position = rng.randrange(len(ids))
                model.delete(ids[position])
                del expected[position]
            else:
                value = rng.randint(0, 99)
                model.insert_at_tail(value)
                expected.append(value)
            assert model.to_ordered_sequence() == expected
            model.validate()
