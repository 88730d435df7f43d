"""Robotics Management System API: authorization engine and persistence."""

__version__ = "0.1.0"
