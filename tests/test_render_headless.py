from blockmatch.components.game_state import GameMode
from blockmatch.components.grid import EMPTY
from blockmatch.config import config_from_dict
from blockmatch.events.bus import (
    EventBus,
    EVENT_MATCH_CLEARED,
    EVENT_MOVE_COMPLETE,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
)
from blockmatch.systems.render import RenderSystem
from blockmatch.utils.board_state import get_grid

from helpers import DummyWindow, make_world


def _render():
    bus = EventBus()
    world = make_world([["A", "B", "C"], ["B", "C", "A"]], initial_mode=GameMode.PLAYING)
    render = RenderSystem(world, bus, DummyWindow(800, 600))
    return bus, world, render


def test_headless_process_lays_out_every_cell():
    bus, world, render = _render()
    render.process()
    assert len(render._last_draw_coords) == 6
    x00, y00 = render._last_draw_coords[(0, 0)]
    x10, y10 = render._last_draw_coords[(1, 0)]
    # Row 0 is drawn above row 1.
    assert x00 == x10 and y00 > y10


def test_phase_snapshots_override_the_live_grid_until_move_completes():
    bus, world, render = _render()
    cleared = ((EMPTY, EMPTY, EMPTY), ("B", "C", "A"))
    bus.emit(EVENT_MATCH_CLEARED, positions=[(0, 0), (0, 1), (0, 2)], types=[], depth=1,
             score_delta=30, snapshot=cleared)
    assert render.current_snapshot() == cleared
    bus.emit(EVENT_MOVE_COMPLETE, src=(0, 0), dst=(0, 1), committed=True, score_delta=30, passes=[3])
    assert render.current_snapshot() == get_grid(world).snapshot()


def test_selection_highlight_tracking():
    bus, world, render = _render()
    bus.emit(EVENT_TILE_SELECTED, row=1, col=2)
    assert render.selected == (1, 2)
    bus.emit(EVENT_TILE_DESELECTED, reason='second_click', prev_row=1, prev_col=2)
    assert render.selected is None


def test_configured_text_overrides_defaults():
    bus, world, render = _render()
    assert render.text['scoreLabel'] == 'Score:'
    world.config.text['scoreLabel'] = 'Points:'
    assert RenderSystem(world, bus, DummyWindow()).text['scoreLabel'] == 'Points:'


def test_configured_block_textures_are_picked_up(tmp_path, monkeypatch):
    import arcade

    (tmp_path / "a.png").write_bytes(b"png")
    config = config_from_dict({
        "grid": {"rows": 2, "cols": 3},
        "assets": {"images": [
            {"name": "A", "path": "a.png", "kind": "block"},
            {"name": "B", "path": "missing.png", "kind": "block"},
            {"name": "C", "kind": "block"},
        ]},
    })
    config.base_dir = tmp_path
    loaded = []

    def fake_load_texture(path):
        loaded.append(path)
        return ("texture", path.name)

    monkeypatch.setattr(arcade, "load_texture", fake_load_texture)
    world = make_world([["A", "B", "C"], ["B", "C", "A"]], config=config, initial_mode=GameMode.PLAYING)
    render = RenderSystem(world, EventBus(), DummyWindow(800, 600))
    render.process()
    render.process()
    assert render._last_draw_textures[(0, 0)] == ("texture", "a.png")
    assert render._last_draw_textures[(1, 2)] == ("texture", "a.png")
    assert render._last_draw_textures[(0, 1)] is None
    assert render._last_draw_textures[(0, 2)] is None
    assert loaded == [tmp_path / "a.png"]
