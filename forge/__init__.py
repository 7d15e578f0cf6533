"""
Forge - habit tracking with streak, consistency, momentum and correlation analytics.
"""

__version__ = "1.0.0"
