"""Domain layer: complaint model, reconciliation and batch upserts."""
