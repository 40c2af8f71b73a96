def compute_variance(physical: int, system: int) -> int:
    """Signed difference between the counted and the recorded quantity."""
    return physical - system
