"""Invariant checks over oscillator state."""
