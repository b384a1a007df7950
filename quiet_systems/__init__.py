"""Quiet Systems revenue operations service."""
