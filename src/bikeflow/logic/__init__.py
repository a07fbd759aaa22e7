"""Trip filtering, traffic aggregation and visual scales."""
