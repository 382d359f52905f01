"""Core layer - configuration, plan cache, and the copy/build engines."""
