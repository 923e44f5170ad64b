"""Test data fixtures."""
