"""Subpackage picked up when submodules are walked."""
