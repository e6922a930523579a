"""Pure availability aggregation, match detection and result statistics."""
