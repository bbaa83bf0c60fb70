"""
togglestack - layered feature-toggle resolution

Builds a single, ordered toggle lookup chain for a named library so that
operators (service owners) and library authors can control toggles
independently without stepping on each other.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
