"""Core enumerations, exceptions and identifier allocation."""
