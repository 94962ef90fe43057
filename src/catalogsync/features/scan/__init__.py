"""Filesystem enumeration and change classification."""
