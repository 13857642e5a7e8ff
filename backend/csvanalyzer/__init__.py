"""Contact CSV Analyzer — dialect sniffing and column type inference for contact imports."""

__version__ = "1.0.0"
