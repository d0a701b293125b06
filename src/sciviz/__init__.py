"""Scientific concept visualizer backed by Gemini."""

__version__ = "0.1.0"
