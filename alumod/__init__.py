"""alumod -- content moderation for the Alumni Connect platform."""

__version__ = "0.1.0"
