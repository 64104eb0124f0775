"""
Domain: User as seen by the sales platform.

Users are owned by an external user service; only the fields needed to
confirm existence are kept.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class User:
    id: str
    name: str = ""
