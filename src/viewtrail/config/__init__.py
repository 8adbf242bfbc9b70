"""
Configuration management module for viewtrail.

Handles application settings loaded from environment variables and the
optional ``.env`` file.
"""

from __future__ import annotations

__all__: list[str] = []
