"""Shared pytest setup."""

import matplotlib

# Headless backend for chart tests; set before pyplot is first imported
matplotlib.use("Agg")
