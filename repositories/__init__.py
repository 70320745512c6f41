"""Persistence: structured queries, entity stores and row mapping."""
