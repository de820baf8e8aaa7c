"""solcanon — deterministic Solidity storage layouts."""

__version__ = "0.1.0"
