"""Test suite for Enchanted Tome."""
