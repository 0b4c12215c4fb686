"""Course Player - course progression and content unlocking for the learning platform."""

__version__ = "0.1.0"
