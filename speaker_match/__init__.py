"""Multi-signal speaker identification for diarized meeting transcripts."""

__version__ = "0.1.0"
