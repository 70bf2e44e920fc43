"""
Grid Memory.

A sequence-memory game: watch cells light up on an N×N grid, then repeat
the pattern. Each cleared round grows the sequence by one step.
"""

__version__ = "0.1.0"
