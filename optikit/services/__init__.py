"""Services used by optikit commands."""
