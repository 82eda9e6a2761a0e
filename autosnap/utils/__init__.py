"""Shared utilities for zfs-autosnap."""
