"""
Combat module for the Mecha Hack resolution engine.

This module handles the resolution mechanics: roll-under checks, initiative,
damage, the reactor die, recharge gates and the engine facade that commits
their results to the host.
"""
