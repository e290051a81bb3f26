"""Study review aggregate, duplicate resolution, batch answering and services."""
