"""Live air traffic overlay: polling, projection and snapshot state."""

__version__ = "0.1.0"
