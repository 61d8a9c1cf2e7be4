"""Data-availability blocks: layout, erasure coding, KZG commitments, recovery and an app-key registry."""

__version__ = "0.1.0"