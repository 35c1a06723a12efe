# Routes package init
"""
TechNotes Backend — API Routes Package
========================================

Route Inventory:
    - notes.py:   GET / POST / PATCH / DELETE  /notes
    - users.py:   GET / POST / PATCH / DELETE  /users
    - health.py:  GET /health

Design Principle:
    Routes are THIN: the request schema validates the body, the service does
    the work, and application exceptions are turned into JSON by the global
    handlers in main.py.
"""
