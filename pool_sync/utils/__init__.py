"""Shared utilities for pool_sync."""
