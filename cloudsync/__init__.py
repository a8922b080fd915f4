"""Save game backup and cloud synchronization"""

__version__ = "0.1.0"
