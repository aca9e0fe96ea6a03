"""
Items module for the Mecha Hack resolution engine.

This module contains the item definitions the engine resolves: enemy and
boss attacks, recharge attacks and consumables.
"""
