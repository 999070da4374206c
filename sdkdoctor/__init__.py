"""SDK Doctor — toolchain inspection and automated remedies."""

__version__ = "0.1.0"
