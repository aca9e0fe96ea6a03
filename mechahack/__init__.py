"""
Mecha Hack resolution engine.

This package contains the dice-driven core of the ruleset: ability checks,
initiative, damage, reactor and recharge state machines, and resource
clamping. Storage and presentation belong to the host.
"""
