"""Shared test helpers for Gaffer."""
