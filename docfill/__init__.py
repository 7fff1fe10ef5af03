"""docfill: fills placeholder tokens in Word templates, one folder tree at a time."""

__version__ = "0.1.0"
