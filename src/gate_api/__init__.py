"""HTTP surface for the intent gate."""
