# Services package init
"""
TechNotes Backend — Services Layer
====================================

What:  Business rules sitting between routes (HTTP) and repositories (persistence).
How:   Services take validated request schemas, enforce uniqueness and
       referential rules, and return response schemas or raise TechNotesError
       subtypes. They are built per request in technotes.dependencies.

Service Inventory:
    - NoteService: list (with usernames), create, update, delete notes
    - UserService: list (never with passwords), create, update, delete users,
      refusing to delete a user who still has notes
"""
