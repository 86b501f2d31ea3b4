"""mailhdr test suite.

What:
  Marks ``tests`` as a package; ``unit`` covers individual modules and ``e2e``
  drives the command-line interface and render/parse round trips.

Invariants & Safety:
  - Importing ``tests`` has no side effects; path setup lives in
    ``conftest.py``.
"""
