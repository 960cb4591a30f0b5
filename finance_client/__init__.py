"""Finance and time-tracking client for the business administration backend."""

__version__ = "1.0.0"
