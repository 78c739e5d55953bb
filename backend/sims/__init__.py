"""
SIMS - inventory and pricing management for a 3D-printing shop
"""
__version__ = "1.0.0"
