"""Boundary adapters: persistence store and upstream Player client."""
