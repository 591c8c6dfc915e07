"""Selection state and the interactive curation loop."""
