"""Construction DNA: 20-tier material catalog with engineering Q&A."""

__version__ = "0.1.0"
