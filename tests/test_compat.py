"""Tests for rubotogen_lib.compat"""

import logging

import pytest

from rubotogen_lib.api import ApiElement
from rubotogen_lib.compat import Reason, check_element, check_methods, select_methods
from rubotogen_lib.errors import MethodConflictError, RemovedError, VersionUnavailableError

MIN, TARGET = 10, 19


def _names(methods):
    return [m.name for m in methods]


class TestScopePruning:
    def test_added_after_target_dropped_silently(self, make_method, caplog):
        selection = select_methods([make_method("onNew", added=21)], MIN, TARGET)
        assert selection.methods == []
        assert selection.pruned[0].reason == Reason.ADDED_AFTER_TARGET
        assert caplog.records == []

    def test_deprecated_at_min_dropped(self, make_method):
        selection = select_methods([make_method("onOld", added=1, deprecated=10)], MIN, TARGET)
        assert selection.methods == []
        assert selection.pruned[0].reason == Reason.DEPRECATED_BEFORE_MIN

    def test_removed_at_min_dropped(self, make_method):
        selection = select_methods([make_method("onGone", added=1, removed=8)], MIN, TARGET)
        assert selection.pruned[0].reason == Reason.REMOVED_BEFORE_MIN
        assert selection.removed == []

    def test_pruning_applies_with_force(self, make_method):
        methods = [make_method("onNew", added=21), make_method("onOld", deprecated=3)]
        assert check_methods(methods, MIN, TARGET, force=True) == []


class TestRemovedAtTarget:
    def test_removed_in_range_reported(self, make_method, caplog):
        methods = [make_method("onA", added=1), make_method("onB", added=1, removed=15)]
        with caplog.at_level(logging.WARNING):
            kept = check_methods(methods, MIN, TARGET)
        assert _names(kept) == ["onA"]
        assert "Can't create onB() -- removed in 15" in caplog.text

    def test_removed_does_not_abort(self, make_method):
        kept = check_methods([make_method("onB", removed=19)], MIN, TARGET)
        assert kept == []

    def test_removed_after_target_kept(self, make_method):
        assert _names(check_methods([make_method("onB", removed=20)], MIN, TARGET)) == ["onB"]


class TestConflicts:
    def test_added_after_min_aborts(self, make_method):
        methods = [make_method("onA", added=1), make_method("onB", added=11)]
        with pytest.raises(MethodConflictError) as exc:
            check_methods(methods, MIN, TARGET)
        assert [c.method.name for c in exc.value.conflicts] == ["onB"]
        assert exc.value.conflicts[0].reason == Reason.ADDED_AFTER_MIN
        assert "Aborting" in str(exc.value)

    def test_deprecated_before_target_aborts(self, make_method, caplog):
        with pytest.raises(MethodConflictError) as exc:
            check_methods([make_method("onB", added=1, deprecated=19)], MIN, TARGET)
        assert exc.value.conflicts[0].reason == Reason.DEPRECATED_BEFORE_TARGET
        assert "deprecated in 19 -- exclude or force" in caplog.text

    def test_force_keeps_conflicting_methods(self, make_method):
        methods = [make_method("onA", added=11), make_method("onB", deprecated=12)]
        assert _names(check_methods(methods, MIN, TARGET, force=True)) == ["onA", "onB"]

    def test_select_exposes_conflicts_without_raising(self, make_method):
        selection = select_methods([make_method("onA"), make_method("onB", added=12)], MIN, TARGET)
        assert _names(selection.methods) == ["onA"]
        assert [c.version for c in selection.conflicts] == [12]
        assert selection.messages == ["Can't create onB() -- added in 12 -- exclude or force"]

    def test_order_is_stable(self, make_method):
        methods = [make_method(n, added=1) for n in ("onC", "onA", "onB")]
        assert _names(check_methods(methods, MIN, TARGET)) == ["onC", "onA", "onB"]


class TestProperties:
    @pytest.mark.parametrize("force", [False, True])
    def test_idempotent(self, make_method, force):
        methods = [
            make_method("onA", added=1),
            make_method("onB", added=1, removed=15),
            make_method("onC", added=21),
            make_method("onD", deprecated=5),
            make_method("onE", added=3, removed=40),
        ]
        if force:
            methods.append(make_method("onF", added=12))
        once = check_methods(methods, MIN, TARGET, force)
        assert check_methods(once, MIN, TARGET, force) == once

    @pytest.mark.parametrize("added,removed,force,kept", [
        (1, 11, True, False),   # removed before target
        (1, 20, True, True),
        (1, 10, True, False),   # removed at min
        (12, 30, True, True),
        (12, 30, False, None),  # conflict
        (20, 30, True, False),  # added after target
        (10, 20, False, True),
    ])
    def test_added_removed_window(self, make_method, added, removed, force, kept):
        methods = [make_method("onX", added=added, removed=removed)]
        if kept is None:
            with pytest.raises(MethodConflictError):
                check_methods(methods, MIN, TARGET, force)
        else:
            assert bool(check_methods(methods, MIN, TARGET, force)) is kept

    def test_min_above_target(self, make_method):
        with pytest.raises(ValueError):
            check_methods([make_method("onA")], 20, 19)


class TestCheckElement:
    def _type(self, **kwargs):
        return ApiElement(name="android.app.Thing", kind="class", **kwargs)

    def test_available(self):
        element = self._type(api_added=1)
        assert check_element(element, MIN, TARGET) is element

    def test_added_after_min(self):
        with pytest.raises(VersionUnavailableError, match="added in 11"):
            check_element(self._type(api_added=11), MIN, TARGET)

    def test_deprecated_before_target(self):
        with pytest.raises(VersionUnavailableError, match="deprecated in 13"):
            check_element(self._type(deprecated=13), MIN, TARGET)

    def test_force_ignores_availability(self):
        assert check_element(self._type(api_added=11, deprecated=13), MIN, TARGET, force=True)

    def test_removed_even_with_force(self):
        with pytest.raises(RemovedError, match="removed in 19"):
            check_element(self._type(api_removed=19), MIN, TARGET, force=True)
