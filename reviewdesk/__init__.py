"""reviewdesk: collect star ratings and advice against a fixed question catalog."""

__version__ = "0.1.0"
