import logging
from typing import Any, Callable, Dict, Optional

from esper import World

from blockmatch.components.game_state import GameMode
from blockmatch.config import GameConfig, SoundAsset
from blockmatch.constants import MATCH_SOUND_NAME, MUSIC_SOUND_NAME
from blockmatch.events.bus import (EventBus, EVENT_MATCH_FOUND, EVENT_NEW_GAME, EVENT_GAME_MODE_CHANGED,
                                   EVENT_TIME_UP)

logger = logging.getLogger(__name__)

# player(asset, loop) returns a handle the stopper accepts, or None when nothing played.
Player = Callable[[SoundAsset, bool], Any]
Stopper = Callable[[Any], None]


class AudioSystem:
    """Match sound once per resolution pass, background music while a session runs.

    Music restarts on the title screen and at every game start and stops when
    time runs out.
    """

    def __init__(self, world: World, event_bus: EventBus, *,
                 player: Optional[Player] = None, stopper: Optional[Stopper] = None):
        self.world = world
        self.event_bus = event_bus
        self.config: GameConfig = getattr(world, "config", None) or GameConfig()
        self._player = player or self._play_with_arcade
        self._stopper = stopper or self._stop_with_arcade
        self._sounds: Dict[str, object] = {}
        self.music = None
        self.event_bus.subscribe(EVENT_MATCH_FOUND, self.on_match_found)
        self.event_bus.subscribe(EVENT_NEW_GAME, self.on_new_game)
        self.event_bus.subscribe(EVENT_GAME_MODE_CHANGED, self.on_game_mode_changed)
        self.event_bus.subscribe(EVENT_TIME_UP, self.on_time_up)

    def on_match_found(self, sender, **kwargs):
        asset = self.config.sound(MATCH_SOUND_NAME)
        if asset is None or not asset.path:
            return
        self._player(asset, False)

    def on_new_game(self, sender, **kwargs):
        self.restart_music()

    def on_game_mode_changed(self, sender, **kwargs):
        if kwargs.get('new_mode') == GameMode.TITLE:
            self.restart_music()

    def on_time_up(self, sender, **kwargs):
        self.stop_music()

    def restart_music(self) -> None:
        self.stop_music()
        asset = self.config.sound(MUSIC_SOUND_NAME)
        if asset is None or not asset.path:
            return
        self.music = self._player(asset, True)

    def stop_music(self) -> None:
        if self.music is None:
            return
        handle, self.music = self.music, None
        self._stopper(handle)

    def _play_with_arcade(self, asset: SoundAsset, loop: bool):
        import arcade
        sound = self._sounds.get(asset.name)
        if sound is None:
            path = self.config.asset_path(asset.path)
            if not path.exists():
                logger.warning("Sound %s not found at %s; skipping", asset.name, path)
                return None
            sound = arcade.load_sound(path)
            self._sounds[asset.name] = sound
        return arcade.play_sound(sound, volume=asset.volume, loop=loop or asset.loop)

    def _stop_with_arcade(self, handle) -> None:
        import arcade
        arcade.stop_sound(handle)
