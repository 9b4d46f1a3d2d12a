"""Test helpers for aptclient."""
