import subprocess
import sys
from pathlib import Path

from crossing.hud import Hud
from crossing.internal.events import Topic
from crossing.internal.math import Direction

ROOT = Path(__file__).resolve().parents[1]


class TestHud:
    def test_follows_the_run(self, make_game):
        game, _ = make_game()
        hud = game.hud
        assert hud.high_score == 1000
        assert hud.lives == 5

        game.move(Direction.LEFT)
        game.step()
        assert hud.score == 20
        assert hud.time_fraction < 1.0

        game.bus.publish(Topic.COLLISION)
        assert hud.lives == 4

        game.advance(2000)
        assert hud.time_fraction == 1.0

    def test_banners(self, context):
        hud = Hud(context)
        context.bus.publish(Topic.GAME_WON)
        assert hud.won and not hud.game_over

        context.bus.publish(Topic.RESET)
        assert not hud.won

        context.bus.publish(Topic.GAME_OVER)
        assert hud.game_over

def test_headless_engine_does_not_load_widgets():
    code = (
        "import sys\n"
        "import crossing.simulation\n"
        "assert 'ipycanvas' not in sys.modules\n"
        "assert 'ipyevents' not in sys.modules\n"
    )
    result = subprocess.run([sys.executable, "-c", code], cwd=ROOT, capture_output=True, text=True)
    assert result.returncode == 0, result.stderr
