"""receiptlens: turn receipt photos and PDFs into structured purchase facts."""

__version__ = "0.1.0"
