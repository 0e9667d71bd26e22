"""Sparse voxel layers for signed distance fields, ESDF building, sphere editing, colour maps and PLY output."""

__version__ = "0.1.0"