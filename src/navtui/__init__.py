"""Textual front end for the API navigator."""
