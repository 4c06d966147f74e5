"""
This package contains all modules related to parsing and building the
binary frames exchanged with the weather station gateway.

Sub-packages handle specific concerns:

- ``frames``: Frame validation, command frame construction, command ids.
- ``tags``: Tag registry, per-variant value decoding and the payload walker.
"""
