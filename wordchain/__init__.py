"""Word successor frequency analysis, CSV tables and Markov-chain text generation."""

__version__ = "1.0.0"