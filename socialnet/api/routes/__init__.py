"""Route modules, registered explicitly in main.py."""
