"""vCenter access-graph connector."""
