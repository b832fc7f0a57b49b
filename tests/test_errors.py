"""Tests for the ErrorBag."""

from fieldcheck.errors import ErrorBag, FieldError


class TestErrorBag:
    def test_starts_empty(self):
        bag = ErrorBag()
        assert not bag.any()
        assert bag.count() == 0
        assert len(bag) == 0
        assert bag.all() == []

    def test_add_keeps_insertion_order_across_fields(self):
        bag = ErrorBag()
        bag.add("email", "first")
        bag.add("name", "second")
        bag.add("email", "third")

        assert bag.all() == ["first", "second", "third"]
        assert [e.field for e in bag] == ["email", "name", "email"]

    def test_all_filters_by_field(self):
        bag = ErrorBag()
        bag.add("email", "bad email")
        bag.add("name", "bad name")
        bag.add("email", "short email")

        assert bag.all("email") == ["bad email", "short email"]
        assert bag.all("name") == ["bad name"]
        assert bag.all("missing") == []

    def test_remove_only_touches_one_field(self):
        bag = ErrorBag()
        bag.add("email", "bad email")
        bag.add("name", "bad name")

        bag.remove("email")

        assert not bag.has("email")
        assert bag.has("name")
        assert bag.count() == 1

    def test_remove_unknown_field_is_noop(self):
        bag = ErrorBag()
        bag.add("email", "bad email")
        bag.remove("nope")
        assert bag.count() == 1

    def test_clear(self):
        bag = ErrorBag()
        bag.add("email", "bad email")
        bag.add("name", "bad name")
        bag.clear()
        assert not bag.any()

    def test_first(self):
        bag = ErrorBag()
        bag.add("email", "one")
        bag.add("email", "two")
        assert bag.first("email") == "one"
        assert bag.first("name") is None

    def test_collect_groups_by_field(self):
        bag = ErrorBag()
        bag.add("email", "one")
        bag.add("name", "two")
        bag.add("email", "three")

        assert bag.collect() == {"email": ["one", "three"], "name": ["two"]}
        assert bag.collect("email") == ["one", "three"]
        assert bag.to_dict() == bag.collect()

    def test_entries_carry_rule_name(self):
        bag = ErrorBag()
        bag.add("email", "bad", rule="email")
        assert bag.entries("email") == [FieldError(field="email", message="bad", rule="email")]
        assert bag.entries()[0].to_dict() == {
            "field": "email",
            "message": "bad",
            "rule": "email",
        }

    def test_iteration_is_a_snapshot(self):
        bag = ErrorBag()
        bag.add("email", "one")
        for error in bag:
            bag.add("name", "added while iterating")
        assert bag.count() == 2
