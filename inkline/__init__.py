"""InkLine: personal notes with autosave, sharing and insights."""

__version__ = "0.1.0"
