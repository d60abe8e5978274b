"""Budget Tracker backend application."""
