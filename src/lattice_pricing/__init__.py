"""Binomial-lattice pricing of vanilla options with single-pass Greeks."""

__version__ = "0.1.0"
