"""Video lifecycle tracking: phase inference and field completion."""

__version__ = "0.1.0"
