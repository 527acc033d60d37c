"""Blueprints for the web dashboard."""
