"""Domain layer: pure timeline logic with no I/O."""
