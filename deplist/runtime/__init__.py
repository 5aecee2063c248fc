"""Runtime: aggregation, configuration loading and display."""
