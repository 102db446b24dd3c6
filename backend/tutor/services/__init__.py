"""Service layer: LLM access and learning logic."""
