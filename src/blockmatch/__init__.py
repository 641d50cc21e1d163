"""Match-three block puzzle built on esper, blinker and arcade."""

__version__ = "0.1.0"
