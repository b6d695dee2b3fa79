"""State layer.

This package holds the only mutable engine state: the per-session
duplicate suppression table and the result feedback slot read by the
presentation layer.  Each piece has exactly one writer.
"""
