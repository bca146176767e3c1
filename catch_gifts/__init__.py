"""
Catch the Gifts
===============

A single-screen arcade game: move the catcher left and right to collect
falling gifts while dodging charcoal. Three hits and the session is over.

All tunable parameters live in game_config.yaml next to this file.
"""
