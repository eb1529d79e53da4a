"""Count matching lines in dated access logs packed in zip archives."""

__version__ = "0.1.0"
