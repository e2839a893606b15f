"""pytest-bdd step definitions."""
