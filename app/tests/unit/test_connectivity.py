"""Tests for ConnectivityAnalyzer drag weights and enclosed joints."""

import pytest
from models.part import PartCategory
from simulation.connectivity import ConnectivityAnalyzer, DragFollowPolicy
from tests.conftest import IN, OUT, PASS, wire


@pytest.fixture
def analyzer():
    return ConnectivityAnalyzer()


class TestReachableJoints:
    def test_counts_hops_through_joints(self, model):
        lamp = model.create_part(PartCategory.INDICATOR)
        j1 = model.create_part(PartCategory.JOINT)
        j2 = model.create_part(PartCategory.JOINT)
        wire(model, lamp, IN, j1, PASS)
        wire(model, j1, PASS, j2, PASS)
        assert ConnectivityAnalyzer.reachable_joints(lamp) == {j1: 1, j2: 2}

    def test_stops_at_non_joint_parts(self, model):
        lamp = model.create_part(PartCategory.INDICATOR)
        j1 = model.create_part(PartCategory.JOINT)
        source = model.create_part(PartCategory.SOURCE)
        j2 = model.create_part(PartCategory.JOINT)
        wire(model, lamp, IN, j1, PASS)
        wire(model, j1, PASS, source, OUT)
        wire(model, source, OUT, j2, PASS)
        assert set(ConnectivityAnalyzer.reachable_joints(lamp)) == {j1}


class TestDistanceRatio:
    def test_joint_only_on_dragged_part_follows_fully(self, model, analyzer):
        lamp = model.create_part(PartCategory.INDICATOR)
        joint = model.create_part(PartCategory.JOINT)
        wire(model, lamp, IN, joint, PASS)
        assert analyzer.weights_for_drag_from(lamp) == {joint: 1.0}

    def test_joint_on_other_part_stays(self, model, analyzer):
        lamp = model.create_part(PartCategory.INDICATOR)
        switch = model.create_part(PartCategory.TOGGLE_SWITCH)
        joint = model.create_part(PartCategory.JOINT)
        wire(model, lamp, IN, joint, PASS)
        wire(model, joint, PASS, switch, OUT)
        assert analyzer.weights_for_drag_from(lamp) == {joint: 0.0}

    def test_joint_on_source_stays(self, model, analyzer):
        lamp = model.create_part(PartCategory.INDICATOR)
        source = model.create_part(PartCategory.SOURCE)
        joint = model.create_part(PartCategory.JOINT)
        wire(model, lamp, IN, joint, PASS)
        wire(model, joint, PASS, source, OUT)
        assert analyzer.weights_for_drag_from(lamp) == {joint: 0.0}

    def test_intermediate_joints_interpolate(self, model, analyzer):
        lamp = model.create_part(PartCategory.INDICATOR)
        switch = model.create_part(PartCategory.TOGGLE_SWITCH)
        j1 = model.create_part(PartCategory.JOINT)
        j2 = model.create_part(PartCategory.JOINT)
        j3 = model.create_part(PartCategory.JOINT)
        wire(model, lamp, IN, j1, PASS)
        wire(model, j1, PASS, j2, PASS)
        wire(model, j2, PASS, j3, PASS)
        wire(model, j3, PASS, switch, IN)
        weights = analyzer.weights_for_drag_from(lamp)
        assert weights[j1] == pytest.approx(2 / 3)
        assert weights[j2] == pytest.approx(1 / 3)
        assert weights[j3] == 0.0

    def test_weights_are_bounded(self, model, analyzer):
        lamp = model.create_part(PartCategory.INDICATOR)
        switch = model.create_part(PartCategory.TOGGLE_SWITCH)
        joints = [model.create_part(PartCategory.JOINT) for _ in range(4)]
        wire(model, lamp, IN, joints[0], PASS)
        wire(model, joints[0], PASS, joints[1], PASS)
        wire(model, joints[1], PASS, joints[2], PASS)
        wire(model, joints[2], PASS, joints[0], PASS)
        wire(model, joints[1], PASS, joints[3], PASS)
        wire(model, joints[3], PASS, switch, IN)
        weights = analyzer.weights_for_drag_from(lamp)
        assert set(weights) == set(joints)
        assert all(0.0 <= w <= 1.0 for w in weights.values())

    def test_no_joints_means_no_weights(self, model, analyzer):
        source = model.create_part(PartCategory.SOURCE)
        lamp = model.create_part(PartCategory.INDICATOR)
        wire(model, source, OUT, lamp, IN)
        assert analyzer.weights_for_drag_from(lamp) == {}


class TestBinaryAnchor:
    def test_anchored_cluster_stays_entirely(self, model):
        lamp = model.create_part(PartCategory.INDICATOR)
        switch = model.create_part(PartCategory.TOGGLE_SWITCH)
        j1 = model.create_part(PartCategory.JOINT)
        j2 = model.create_part(PartCategory.JOINT)
        wire(model, lamp, IN, j1, PASS)
        wire(model, j1, PASS, j2, PASS)
        wire(model, j2, PASS, switch, IN)
        analyzer = ConnectivityAnalyzer(DragFollowPolicy.BINARY_ANCHOR)
        assert analyzer.weights_for_drag_from(lamp) == {j1: 0.0, j2: 0.0}

    def test_free_cluster_moves_entirely(self, model):
        lamp = model.create_part(PartCategory.INDICATOR)
        j1 = model.create_part(PartCategory.JOINT)
        j2 = model.create_part(PartCategory.JOINT)
        wire(model, lamp, IN, j1, PASS)
        wire(model, j1, PASS, j2, PASS)
        analyzer = ConnectivityAnalyzer()
        weights = analyzer.weights_for_drag_from(lamp, DragFollowPolicy.BINARY_ANCHOR)
        assert weights == {j1: 1.0, j2: 1.0}


class TestEnclosedJoints:
    def test_joint_between_selected_parts_is_included(self, model):
        a = model.create_part(PartCategory.TOGGLE_SWITCH)
        b = model.create_part(PartCategory.INDICATOR)
        joint = model.create_part(PartCategory.JOINT)
        wire(model, a, OUT, joint, PASS)
        wire(model, joint, PASS, b, IN)
        assert ConnectivityAnalyzer.enclosed_joints(model.parts, [a, b]) == {joint}

    def test_joint_touching_unselected_part_is_excluded(self, model):
        a = model.create_part(PartCategory.TOGGLE_SWITCH)
        b = model.create_part(PartCategory.INDICATOR)
        outside = model.create_part(PartCategory.INDICATOR)
        joint = model.create_part(PartCategory.JOINT)
        wire(model, a, OUT, joint, PASS)
        wire(model, joint, PASS, b, IN)
        wire(model, joint, PASS, outside, IN)
        assert ConnectivityAnalyzer.enclosed_joints(model.parts, [a, b]) == set()

    def test_whole_joint_cluster_included(self, model):
        a = model.create_part(PartCategory.TOGGLE_SWITCH)
        j1 = model.create_part(PartCategory.JOINT)
        j2 = model.create_part(PartCategory.JOINT)
        wire(model, a, OUT, j1, PASS)
        wire(model, j1, PASS, j2, PASS)
        assert ConnectivityAnalyzer.enclosed_joints(model.parts, [a]) == {j1, j2}

    def test_isolated_cluster_is_left_alone(self, model):
        a = model.create_part(PartCategory.TOGGLE_SWITCH)
        j1 = model.create_part(PartCategory.JOINT)
        j2 = model.create_part(PartCategory.JOINT)
        wire(model, j1, PASS, j2, PASS)
        assert ConnectivityAnalyzer.enclosed_joints(model.parts, [a]) == set()

    def test_selected_joint_counts_as_selection(self, model):
        selected_joint = model.create_part(PartCategory.JOINT)
        other = model.create_part(PartCategory.JOINT)
        wire(model, selected_joint, PASS, other, PASS)
        assert ConnectivityAnalyzer.enclosed_joints(model.parts, [selected_joint]) == {other}
