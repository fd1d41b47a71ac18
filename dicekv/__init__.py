"""Components of an in-memory key-value server: RESP codec, varints, deques, bitmaps, bloom filters and sessions."""

__version__ = "0.1.0"