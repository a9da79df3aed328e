"""Routers of the tailoring editor web application."""
