"""Relay provider status callbacks to connected browsers."""
