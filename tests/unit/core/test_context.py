"""Tests for the visit context carried through element recursion."""

from aasdb.core.context import OperationGroup, VisitContext


class TestOperationGroup:
    def test_prefixes(self) -> None:
        assert OperationGroup.INPUT.prefix == "In-"
        assert OperationGroup.OUTPUT.prefix == "Out-"
        assert OperationGroup.INOUTPUT.prefix == "IO-"


class TestVisitContext:
    def test_defaults(self) -> None:
        context = VisitContext(submodel_id="sm")
        assert context.parent_id is None
        assert context.prefix == ""

    def test_child_of_leaves_caller_untouched(self) -> None:
        context = VisitContext(submodel_id="sm")
        child = context.child_of("parent")
        assert child.parent_id == "parent"
        assert child.submodel_id == "sm"
        assert context.parent_id is None

    def test_in_group_leaves_caller_untouched(self) -> None:
        context = VisitContext(submodel_id="sm", parent_id="op")
        grouped = context.in_group(OperationGroup.OUTPUT)
        assert grouped.prefix == "Out-"
        assert grouped.parent_id == "op"
        assert context.prefix == ""

    def test_positions_shared_by_derived_contexts(self) -> None:
        """Pre-order positions continue across parent and child contexts."""
        context = VisitContext(submodel_id="sm")
        assert context.next_position() == 0
        child = context.child_of("a")
        assert child.next_position() == 1
        assert child.in_group(OperationGroup.INPUT).next_position() == 2
        assert context.next_position() == 3

    def test_positions_independent_per_submodel(self) -> None:
        first = VisitContext(submodel_id="sm1")
        second = VisitContext(submodel_id="sm2")
        first.next_position()
        assert second.next_position() == 0
