"""Order fulfillment and inventory consistency engine."""

__version__ = "1.0.0"
