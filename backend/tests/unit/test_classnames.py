"""Unit tests for cn() class-name composition"""
import pytest

from kharcha.utils.classnames import cn


class TestComposition:

    def test_joins_strings(self):
        assert cn("btn", "btn-primary") == "btn btn-primary"

    def test_skips_falsy_values(self):
        assert cn("base", None, False, "", "end") == "base end"

    def test_conditional_dict(self):
        assert cn({"active": True, "idle": False}) == "active"

    def test_nested_lists(self):
        assert cn(["a", ["b", {"c": 1}]], ("d",)) == "a b c d"

    def test_no_inputs(self):
        assert cn() == ""


class TestConflictResolution:

    @pytest.mark.parametrize("inputs,expected", [
        (("p-4", "p-8"), "p-8"),
        (("px-2 py-1", "p-4"), "p-4"),
        (("p-4", "px-2"), "p-4 px-2"),
        (("text-red-500", "text-blue-500"), "text-blue-500"),
        (("text-sm text-red-500",), "text-sm text-red-500"),
        (("block", "hidden"), "hidden"),
        (("bg-white", {"bg-black": True}), "bg-black"),
    ])
    def test_last_wins(self, inputs, expected):
        assert cn(*inputs) == expected

    def test_modifiers_are_separate(self):
        assert cn("p-2 hover:p-4", "p-3") == "hover:p-4 p-3"

    def test_modifier_order_does_not_matter(self):
        assert cn("hover:md:p-2", "md:hover:p-4") == "md:hover:p-4"

    def test_important_is_separate(self):
        assert cn("!p-2", "p-4") == "!p-2 p-4"

    def test_unknown_classes_are_kept(self):
        assert cn("card", "nav-link", "card") == "card nav-link card"
