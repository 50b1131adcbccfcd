"""DM Companion - character sheet rules and encounter generation for D&D 5E.

Packages:
    core: Configuration, logging and exceptions.
    models: Pydantic models and enums.
    rules: Embedded rule tables.
    engine: Derived stats, trait effects, encounters and dice.
    storage: Accounts, user sessions and the monster catalog.
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "DM Companion Contributors"

__all__ = ["__version__", "__author__"]
