"""Unit tests for rest-harness."""
