"""Entrypoints that hand edge events to the gateway."""
