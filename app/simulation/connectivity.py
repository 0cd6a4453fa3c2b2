"""
simulation/connectivity.py

Joint sub-graph queries used when an interactive move starts, with no Qt
dependencies. Both queries are read-only and uncached; callers re-run
them after the topology changes.

- weights_for_drag_from: how strongly each joint hanging off a dragged
  part should follow the drag (0 = stays put, 1 = moves with the part).
- enclosed_joints: joints that sit strictly between selected parts and
  should travel with a group move without being selected themselves.
"""

import logging
from collections import deque
from enum import Enum
from typing import Iterable, Optional

from models.part import Part

logger = logging.getLogger(__name__)


class DragFollowPolicy(Enum):
    """How joint follow weights are derived."""

    # anchor_distance / (source_distance + anchor_distance), per joint
    DISTANCE_RATIO = "distance_ratio"
    # 0 for the whole joint cluster if it touches any anchor, else 1
    BINARY_ANCHOR = "binary_anchor"


class ConnectivityAnalyzer:
    """Breadth-first queries over the joint sub-graph."""

    def __init__(self, policy: DragFollowPolicy = DragFollowPolicy.DISTANCE_RATIO):
        self.policy = policy

    # ------------------------------------------------------------------
    # Drag-follow weighting
    # ------------------------------------------------------------------

    @staticmethod
    def reachable_joints(source_part: Part) -> dict[Part, int]:
        """
        Joints reachable from ``source_part`` through joints only.

        Returns:
            Joint -> hop count from ``source_part`` (directly wired joints
            have distance 1), in discovery order.
        """
        distances: dict[Part, int] = {}
        queue: deque[Part] = deque()

        for _, neighbor in source_part.neighbors():
            if neighbor.is_joint and neighbor is not source_part and neighbor not in distances:
                distances[neighbor] = 1
                queue.append(neighbor)

        while queue:
            current = queue.popleft()
            for _, neighbor in current.neighbors():
                if neighbor is source_part or not neighbor.is_joint:
                    continue
                if neighbor not in distances:
                    distances[neighbor] = distances[current] + 1
                    queue.append(neighbor)
        return distances

    @staticmethod
    def _is_anchor_seed(joint: Part, source_part: Part) -> bool:
        """A joint touching some non-joint part other than the dragged one."""
        return any(
            not neighbor.is_joint and neighbor is not source_part
            for _, neighbor in joint.neighbors()
        )

    def anchor_distances(self, source_part: Part, reachable: dict[Part, int]) -> dict[Part, int]:
        """
        Multi-source BFS from every anchor seed, restricted to ``reachable``.

        Returns:
            Joint -> hops to the nearest anchor seed (seeds are 0). Joints
            with no anchor in reach are absent.
        """
        distances: dict[Part, int] = {}
        queue: deque[Part] = deque()
        for joint in reachable:
            if self._is_anchor_seed(joint, source_part):
                distances[joint] = 0
                queue.append(joint)

        while queue:
            current = queue.popleft()
            for _, neighbor in current.neighbors():
                if neighbor in reachable and neighbor not in distances:
                    distances[neighbor] = distances[current] + 1
                    queue.append(neighbor)
        return distances

    def weights_for_drag_from(self, source_part: Part, policy: Optional[DragFollowPolicy] = None) -> dict[Part, float]:
        """
        Follow weight in [0, 1] for every joint reachable from ``source_part``.

        Args:
            source_part: The part being dragged.
            policy: Overrides the analyzer's policy for this call.

        Returns:
            Joint -> weight.
        """
        policy = policy or self.policy
        reachable = self.reachable_joints(source_part)
        if not reachable:
            return {}

        if policy is DragFollowPolicy.BINARY_ANCHOR:
            anchored = any(self._is_anchor_seed(joint, source_part) for joint in reachable)
            weight = 0.0 if anchored else 1.0
            return {joint: weight for joint in reachable}

        anchors = self.anchor_distances(source_part, reachable)
        weights = {}
        for joint, source_distance in reachable.items():
            if joint not in anchors:
                weights[joint] = 1.0
            else:
                anchor_distance = anchors[joint]
                weights[joint] = anchor_distance / (source_distance + anchor_distance)
        logger.debug(
            "Drag weights from %s: %d joints, %d anchored", source_part.part_id, len(weights), len(anchors)
        )
        return weights

    # ------------------------------------------------------------------
    # Enclosed-joint clustering
    # ------------------------------------------------------------------

    @staticmethod
    def enclosed_joints(all_parts: Iterable[Part], selected_parts: Iterable[Part]) -> set[Part]:
        """
        Find unselected joints that should move with a selection.

        Unselected joints are grouped into clusters connected through
        other unselected joints. A cluster is included when every non-joint
        part it touches is selected and it touches at least one selected
        part (a selected joint counts). Isolated clusters are left alone.

        Returns:
            The joints to include.
        """
        selected = set(selected_parts)
        included: set[Part] = set()
        visited: set[Part] = set()

        for part in all_parts:
            if not part.is_joint or part in selected or part in visited:
                continue

            cluster = []
            queue: deque[Part] = deque([part])
            visited.add(part)
            enclosed = True
            touches_selection = False

            while queue:
                current = queue.popleft()
                cluster.append(current)
                for _, neighbor in current.neighbors():
                    if neighbor in selected:
                        touches_selection = True
                    elif neighbor.is_joint:
                        if neighbor not in visited:
                            visited.add(neighbor)
                            queue.append(neighbor)
                    else:
                        enclosed = False

            if enclosed and touches_selection:
                included.update(cluster)

        return included
