"""Pure domain model: entities, value objects and business rules (no I/O)."""
