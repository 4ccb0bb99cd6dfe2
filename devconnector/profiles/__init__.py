"""Developer profiles: one document per user with embedded experience/education."""
