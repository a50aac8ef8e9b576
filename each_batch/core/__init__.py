"""Batch iteration core: configuration, seek predicates, enumerators and query sources."""
