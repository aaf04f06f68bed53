"""Trainwell: recovery, streaks, and suggestions from workout and meal logs."""

__version__ = "1.0.0"
