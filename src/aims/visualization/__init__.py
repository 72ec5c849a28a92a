"""Matplotlib plots of body positions and interceptor trajectories."""
