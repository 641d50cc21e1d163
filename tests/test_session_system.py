from blockmatch.components.game_state import GameMode
from blockmatch.events.bus import (
    EventBus,
    EVENT_GAME_MODE_CHANGED,
    EVENT_MOVE_COMPLETE,
    EVENT_NEW_GAME,
    EVENT_SCREEN_ADVANCE,
    EVENT_TIME_UP,
)
from blockmatch.systems.board import BoardSystem
from blockmatch.systems.session_system import SessionSystem
from blockmatch.utils.board_state import current_mode, get_countdown, get_grid, get_move_state, get_score

from helpers import drive_ticks, make_config, make_world


def _session(time_limit=2, initial_score=5):
    bus = EventBus()
    config = make_config(5, 5, timeLimitSeconds=time_limit, initialScore=initial_score)
    world = make_world(config=config)
    BoardSystem(world, bus, populate=False)
    SessionSystem(world, bus)
    return bus, world


def test_screens_advance_in_order():
    bus, world = _session()
    changes = []
    bus.subscribe(EVENT_GAME_MODE_CHANGED, lambda s, **k: changes.append((k['previous_mode'], k['new_mode'])))
    assert current_mode(world) == GameMode.TITLE
    bus.emit(EVENT_SCREEN_ADVANCE)
    assert current_mode(world) == GameMode.INSTRUCTIONS
    bus.emit(EVENT_SCREEN_ADVANCE)
    assert current_mode(world) == GameMode.PLAYING
    assert changes == [
        (GameMode.TITLE, GameMode.INSTRUCTIONS),
        (GameMode.INSTRUCTIONS, GameMode.PLAYING),
    ]


def test_starting_a_game_resets_score_timer_and_board():
    bus, world = _session()
    started = []
    bus.subscribe(EVENT_NEW_GAME, lambda s, **k: started.append(True))
    get_score(world).value = 999
    bus.emit(EVENT_SCREEN_ADVANCE)
    bus.emit(EVENT_SCREEN_ADVANCE)
    assert started == [True]
    assert get_score(world).value == 5
    assert get_countdown(world).remaining == 2.0
    assert get_grid(world).get(0, 0) is not None


def test_advance_is_ignored_while_playing():
    bus, world = _session()
    bus.emit(EVENT_SCREEN_ADVANCE)
    bus.emit(EVENT_SCREEN_ADVANCE)
    bus.emit(EVENT_SCREEN_ADVANCE)
    assert current_mode(world) == GameMode.PLAYING


def test_countdown_only_runs_while_playing_and_ends_the_game():
    bus, world = _session(time_limit=2)
    times_up = []
    bus.subscribe(EVENT_TIME_UP, lambda s, **k: times_up.append(k['score']))
    drive_ticks(bus, 3, dt=0.5)
    assert get_countdown(world).remaining == 2.0
    bus.emit(EVENT_SCREEN_ADVANCE)
    bus.emit(EVENT_SCREEN_ADVANCE)
    drive_ticks(bus, 3, dt=0.5)
    assert get_countdown(world).remaining == 0.5
    assert current_mode(world) == GameMode.PLAYING
    get_score(world).value = 40
    drive_ticks(bus, 2, dt=0.5)
    assert current_mode(world) == GameMode.GAME_OVER
    assert get_countdown(world).remaining == 0.0
    assert times_up == [40]
    drive_ticks(bus, 4, dt=0.5)
    assert times_up == [40]


def test_game_over_click_returns_to_title_with_fresh_session():
    bus, world = _session(time_limit=1)
    bus.emit(EVENT_SCREEN_ADVANCE)
    bus.emit(EVENT_SCREEN_ADVANCE)
    get_score(world).value = 70
    drive_ticks(bus, 2, dt=0.5)
    assert current_mode(world) == GameMode.GAME_OVER
    bus.emit(EVENT_SCREEN_ADVANCE)
    assert current_mode(world) == GameMode.TITLE
    assert get_score(world).value == 5
    assert get_countdown(world).remaining == 1.0


def test_time_up_waits_for_the_move_in_flight_and_reports_its_score():
    bus, world = _session(time_limit=1)
    times_up = []
    bus.subscribe(EVENT_TIME_UP, lambda s, **k: times_up.append(k['score']))
    bus.emit(EVENT_SCREEN_ADVANCE)
    bus.emit(EVENT_SCREEN_ADVANCE)
    get_move_state(world).begin((0, 0), (0, 1))
    drive_ticks(bus, 2, dt=0.5)
    assert current_mode(world) == GameMode.GAME_OVER
    assert times_up == []
    get_score(world).value += 30
    get_move_state(world).finish()
    bus.emit(EVENT_MOVE_COMPLETE, src=(0, 0), dst=(0, 1), committed=True, score_delta=30, passes=[3])
    assert times_up == [35]
    bus.emit(EVENT_MOVE_COMPLETE, src=(0, 0), dst=(0, 1), committed=False, score_delta=0, passes=[])
    assert times_up == [35]


def test_leaving_game_over_flushes_a_pending_time_up():
    bus, world = _session(time_limit=1)
    times_up = []
    bus.subscribe(EVENT_TIME_UP, lambda s, **k: times_up.append(k['score']))
    bus.emit(EVENT_SCREEN_ADVANCE)
    bus.emit(EVENT_SCREEN_ADVANCE)
    get_score(world).value = 20
    get_move_state(world).begin((0, 0), (0, 1))
    drive_ticks(bus, 2, dt=0.5)
    assert times_up == []
    bus.emit(EVENT_SCREEN_ADVANCE)
    assert times_up == [20]
    assert current_mode(world) == GameMode.TITLE
