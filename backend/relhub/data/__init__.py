"""Built-in data shipped with the application."""
