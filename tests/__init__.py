"""Tests for the payfone_auth package."""
