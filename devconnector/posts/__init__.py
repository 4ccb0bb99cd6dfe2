"""Feed posts with embedded likes and comments."""
