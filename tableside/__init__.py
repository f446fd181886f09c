"""
Tableside - restaurant ordering and floor-management backend
"""

__version__ = "1.0.0"
