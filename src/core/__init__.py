"""
Core business logic for the exercise log.

This module is framework-agnostic - it doesn't import FastAPI, PyMongo,
or any infrastructure concerns. Validation and the date rules can be
tested in isolation from the HTTP layer and the database.
"""
