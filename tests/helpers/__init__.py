"""Test helpers for Herald."""
