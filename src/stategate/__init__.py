"""stategate - HTTP façade over a pluggable key/value state backend."""

__version__ = "0.1.0"
