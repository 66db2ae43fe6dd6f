"""
Ski Adventure
=============

A skier descends an endless slope, dodging trees and snowmen and catching
fish. Every five fish raise the level, which speeds up the scroll and spawns
more of everything.

All tunable parameters are in game_config.yaml.
"""
