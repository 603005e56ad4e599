"""cachesweep - find, measure and clear cache directories."""

__version__ = "0.1.0"
