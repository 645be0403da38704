"""Utility modules for optikit."""
