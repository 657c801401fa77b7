"""Document storage on the local file system."""
