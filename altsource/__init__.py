"""AltSource repository server: an AltStore-compatible source built from a config file and the packages on disk."""

__version__ = "0.1.0"
