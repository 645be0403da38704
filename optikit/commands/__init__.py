"""Command modules for the optikit CLI."""
