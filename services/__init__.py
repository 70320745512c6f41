"""Pure computations that turn entity collections into view-models."""
