"""
Tests for the game app.

This package contains tests for:
- XGID decoding and encoding
- Board model invariants and rules
- Legal move generation
"""
