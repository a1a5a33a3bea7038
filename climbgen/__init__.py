"""Procedural generator for voxel climbing puzzle levels."""

__version__ = "1.0.0"
