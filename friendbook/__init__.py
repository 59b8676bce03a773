"""Friendbook social network API with realtime notification delivery."""
