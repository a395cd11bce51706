"""Domain layer: aid request records, session view state and errors."""
