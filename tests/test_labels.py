"""
Tests for the label table.
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nibble_asm.labels import LabelTable
from nibble_asm.sources import Span


class TestLabelTable:

    def test_insert_assigns_sequential_ids(self):
        labels = LabelTable()
        assert labels.insert_unique("a", Span(0, 2)) == 0
        assert labels.insert_unique("b", Span(3, 2)) == 1
        assert len(labels) == 2

    def test_insert_duplicate_raises(self):
        labels = LabelTable()
        labels.insert_unique("a")
        with pytest.raises(KeyError):
            labels.insert_unique("a")

    def test_forward_reference_then_definition(self):
        """Test that a reference and its later definition share one id."""
        labels = LabelTable()
        ref_id = labels.get_or_insert_reference("loop")
        assert labels.get_span(ref_id) is None
        assert labels.get_value(ref_id) is None

        assert labels.get_id("loop") == ref_id
        labels.set_span(ref_id, Span(10, 5))
        assert labels.get_span(ref_id) == Span(10, 5)
        assert len(labels) == 1

    def test_reference_reuses_existing_id(self):
        labels = LabelTable()
        label_id = labels.insert_unique("end", Span(0, 4))
        assert labels.get_or_insert_reference("end") == label_id

    def test_values(self):
        labels = LabelTable()
        label_id = labels.insert_unique("x")
        labels.set_value(label_id, 7)
        assert labels.get_value(label_id) == 7
        assert labels.as_dict() == {"x": 7}

    def test_names_are_case_sensitive(self):
        labels = LabelTable()
        labels.insert_unique("Loop")
        assert "Loop" in labels
        assert "loop" not in labels
        assert labels.get_id("loop") is None

    def test_iteration_in_id_order(self):
        labels = LabelTable()
        labels.get_or_insert_reference("b")
        labels.insert_unique("a", Span(0, 2))
        assert [record.name for record in labels] == ["b", "a"]
        assert [record.is_defined for record in labels] == [False, True]
        assert labels.get_name(1) == "a"
