"""Dataset registry layer.

This package owns the readiness-gated registry of imported datasets
and the lookup helpers built on top of it.
"""
