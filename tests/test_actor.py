from crossing.config import LOSE_LIFE_ANIMATION
from crossing.internal.events import Topic
from crossing.internal.math import Direction


class TestActorMovement:
    def test_starts_on_its_start_cell(self, game):
        actor = game.actor
        assert (actor.left, actor.top) == (480, 1120)
        assert actor.row == 14
        assert actor.extent().right == 560

    def test_move_one_cell(self, game):
        actor = game.actor
        actor.move(Direction.UP)
        assert (actor.left, actor.top, actor.row) == (480, 1040, 13)
        actor.move(Direction.LEFT)
        assert actor.left == 400
        actor.move(Direction.RIGHT)
        actor.move(Direction.RIGHT)
        assert actor.left == 560
        actor.move(Direction.DOWN)
        assert (actor.top, actor.row) == (1120, 14)

    def test_down_at_bottom_is_clamped_without_row_change(self, game):
        actor = game.actor
        actor.move(Direction.DOWN)
        assert actor.top == 1120
        assert actor.row == 14

    def test_up_at_top_bound_is_clamped_without_row_change(self, make_game):
        game, _ = make_game(lanes=())
        actor = game.actor
        for _ in range(20):
            actor.move(Direction.UP)
        assert actor.top == 160
        assert actor.row == 2
        assert game.board.row_at(actor.top) == actor.row

    def test_horizontal_clamp(self, game):
        actor = game.actor
        for _ in range(10):
            actor.move(Direction.LEFT)
        assert actor.left == 0
        for _ in range(20):
            actor.move(Direction.RIGHT)
        assert actor.left == 880

    def test_every_attempt_publishes_moved(self, make_game):
        game, events = make_game()
        game.actor.move(Direction.DOWN)
        game.actor.move(Direction.LEFT)
        assert events.count(Topic.PLAYER_MOVED) == 2

    def test_frozen_actor_ignores_moves(self, make_game):
        game, events = make_game()
        game.bus.publish(Topic.PLAYER_FREEZE)
        game.actor.move(Direction.UP)

        assert game.actor.top == 1120
        assert events.count(Topic.PLAYER_MOVED) == 0

        game.bus.publish(Topic.PLAYER_UNFREEZE)
        game.actor.move(Direction.UP)
        assert game.actor.top == 1040

    def test_move_plays_directional_animation(self, game):
        game.actor.move(Direction.RIGHT)
        animation = game.actor.current_animation
        assert animation is game.actor.animations["right"]
        assert animation.playing
        assert game.actor.frame(0, 0).sheet_offset.x == 160 + 80

        game.scheduler.advance(150)
        assert not animation.playing
        assert game.actor.frame(0, 0).sheet_offset.x == 160


class TestActorEvents:
    def test_set_position_clamps_without_event(self, make_game):
        game, events = make_game()
        game.actor.set_position(-30)
        assert game.actor.left == 0
        game.actor.set_position(1000)
        assert game.actor.left == 880
        assert game.actor.row == 14
        assert events.count(Topic.PLAYER_MOVED) == 0

    def test_drift_only_applies_on_matching_row(self, game):
        game.bus.publish(Topic.LANE_DRIFT, 1040.0, 5.0)
        assert game.actor.left == 480

        game.bus.publish(Topic.LANE_DRIFT, 1120.0, -7.0)
        assert game.actor.left == 473

    def test_hidden_at_goal_until_reset(self, game):
        game.bus.publish(Topic.PLAYER_AT_GOAL)
        assert game.actor.hidden
        assert not game.actor.frame(0, 0).visible

        game.bus.publish(Topic.RESET)
        assert not game.actor.hidden

    def test_lost_life_plays_animation(self, game):
        game.bus.publish(Topic.PLAYER_LOST_LIFE)
        assert game.actor.current_animation is game.actor.animations[LOSE_LIFE_ANIMATION]

    def test_reset_returns_to_start_and_clears_animation(self, game):
        actor = game.actor
        actor.move(Direction.UP)
        actor.move(Direction.LEFT)

        actor.reset()

        assert (actor.left, actor.top, actor.row) == (480, 1120, 14)
        assert actor.current_animation is None
        assert not actor.animations["left"].playing
