"""Behavioural feature tests."""
