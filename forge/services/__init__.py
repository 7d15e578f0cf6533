"""
Forge services package.
"""
