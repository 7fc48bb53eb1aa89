"""Core request execution and scheduling logic."""
