"""Static content-schema extraction for marked UI components."""

__version__ = "0.1.0"
