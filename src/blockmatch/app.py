"""Arcade window for the block-matching game.

Sets up the ECS world, event bus and systems, then forwards window
callbacks onto the bus.
"""
import argparse
import logging

from arcade import Window, run, set_background_color, color

from blockmatch.config import load_config
from blockmatch.events.bus import EVENT_TICK, EventBus, EVENT_MOUSE_PRESS
from blockmatch.world import create_world
from blockmatch.systems.audio import AudioSystem
from blockmatch.systems.board import BoardSystem
from blockmatch.systems.input import InputSystem
from blockmatch.systems.move_system import MoveSystem
from blockmatch.systems.render import RenderSystem
from blockmatch.systems.session_system import SessionSystem

logger = logging.getLogger(__name__)


class BlockMatchWindow(Window):
    def __init__(self, config):
        super().__init__(config.canvas_width, config.canvas_height, config.text.get("title", "Block Match"))
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        self.world = create_world(config)

        # Board and move resolution
        self.board_system = BoardSystem(self.world, self.event_bus, populate=False)
        self.move_system = MoveSystem(self.world, self.event_bus)

        # Session flow
        self.session_system = SessionSystem(self.world, self.event_bus)

        # Interface systems
        self.input_system = InputSystem(self.event_bus, self, self.world)
        self.render_system = RenderSystem(self.world, self.event_bus, self)
        self.audio_system = AudioSystem(self.world, self.event_bus)

        set_background_color(color.BLACK)
        # Title music; later restarts follow the session events.
        self.audio_system.restart_music()

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Block matching puzzle")
    parser.add_argument("--config", help="path to data.json (defaults to the bundled one)")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.config)
    logger.info("Opening %dx%d window", config.canvas_width, config.canvas_height)
    BlockMatchWindow(config)
    run()


if __name__ == "__main__":
    main()
