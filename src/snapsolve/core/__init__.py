"""Core data types for the snapsolve pipeline."""
