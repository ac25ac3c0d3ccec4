"""Domain services for the Guildhall application."""
