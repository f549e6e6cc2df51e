"""Board engine, contact registry and identity context."""
