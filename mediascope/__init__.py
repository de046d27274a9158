"""MediaScope: multi-source media catalog aggregation."""
