# tests/property/__init__.py
"""Property-based tests for completion-mux.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of.

Test categories:
- mux/: Exactly-once delivery, settlement ordering, size accounting
"""
