"""Smart Closet application wiring."""
