"""Migration burndown analytics: normalization, projection and status classification."""

__version__ = "1.0.0"
