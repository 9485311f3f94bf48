"""Rating calculation modules."""
