"""HTTP surface for the layout engines."""
