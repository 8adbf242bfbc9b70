"""
viewtrail - Personal YouTube watch history analytics.

Turns a Google Takeout ``watch-history.html`` export into normalized,
deduplicated watch records and computes viewing statistics over them.
"""

from __future__ import annotations

__version__ = "0.4.0"
__author__ = "viewtrail"
__email__ = "noreply@viewtrail.dev"
__license__ = "AGPL-3.0-or-later"

__all__ = ["__version__", "__author__", "__email__", "__license__"]
