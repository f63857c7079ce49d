"""meshmaker: build a surface mesh from an MRC/MAP density map."""

__version__ = "0.3.0"
