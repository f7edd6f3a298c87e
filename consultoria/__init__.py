"""Notification core of the consultoria business backend.

Ensures the local ``consultoria`` package is treated as a regular package
instead of a namespace package.
"""
