"""Terminal companion for keeping airports and analysing an OnAir FBO network."""

__version__ = "0.1.0"