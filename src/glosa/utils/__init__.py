"""Shared utilities for glosa."""
