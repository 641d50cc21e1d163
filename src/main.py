"""Entry point for the block-matching puzzle.

Sets up the arcade window; see blockmatch.app for the system wiring.
"""
from blockmatch.app import main

if __name__ == "__main__":
    main()
