"""Decoding and querying of TZif files."""
