from crossing.board import Board
from crossing.config import ObstacleKind
from crossing.internal.events import Topic
from crossing.internal.math import Extent
from crossing.logic.field import ObstacleField


class TestObstacleField:
    def test_lanes_are_built_on_board_initialize(self, context):
        field = ObstacleField(context)
        assert field.lanes == []

        Board(context).initialize()

        assert len(field.lanes) == 11
        assert field.lane_at(240).policy.value == "float"
        assert field.lane_at(80) is None

    def test_default_layout_obstacle_counts(self, game):
        counts = {lane.row: len(lane.obstacles) for lane in game.field.lanes}
        assert counts == {2: 5, 3: 3, 4: 4, 5: 2, 6: 3, 7: 4, 9: 2, 10: 2, 11: 2, 12: 2, 13: 2}

    def test_row_without_lane_never_collides(self, game):
        collisions = []
        game.bus.subscribe(Topic.COLLISION, lambda: collisions.append(True))

        assert not game.field.check_collisions(640, Extent(0, 880))
        assert not game.field.check_collisions(1120, Extent(0, 880))
        assert collisions == []

    def test_collision_is_published(self, game):
        collisions = []
        game.bus.subscribe(Topic.COLLISION, lambda: collisions.append(True))

        # race cars start on columns 2 and 6 of row 13
        assert game.field.check_collisions(1040, Extent(160, 240))
        assert collisions == [True]

    def test_render_moves_every_lane(self, game):
        before = {lane.row: [o.left for o in lane.obstacles] for lane in game.field.lanes}
        game.field.render()
        after = {lane.row: [o.left for o in lane.obstacles] for lane in game.field.lanes}

        assert after[2] == before[2]
        assert after[13] == [left - 4 for left in before[13]]
        assert after[10] == [left + 12 for left in before[10]]

    def test_reset_restores_start_positions(self, game):
        start = {lane.row: [o.left for o in lane.obstacles] for lane in game.field.lanes}
        for _ in range(10):
            game.field.render()

        game.bus.publish(Topic.RESET)

        assert {lane.row: [o.left for o in lane.obstacles] for lane in game.field.lanes} == start

    def test_claimed_goals_count(self, game):
        game.field.check_collisions(160, Extent(0, 80))
        game.field.check_collisions(160, Extent(0, 80))
        assert game.field.claimed_goals == 1
        markers = [o for o in game.field.lane_at(160).obstacles if o.kind is ObstacleKind.GOAL_MARKER]
        assert len(markers) == 1
