"""Deterministic procedural city layout generation.

The public API lives in ``citylayout.generation``.
"""
