"""formfill - Admission form PDF filling service."""

__version__ = "0.1.0"
