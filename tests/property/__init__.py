# tests/property/__init__.py
"""Property-based tests for retainer.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of. Deleting a backup is
irreversible, so the expiry invariants get the heaviest coverage.

Test categories:
- core/: Grammar totality, chain construction and expiration invariants
"""
