"""
InkLine client core.

Session store, notes collection, editor synchronisation, list projection,
sharing links and local preferences. Components receive their collaborators
explicitly; there is no module-level client state.
"""
