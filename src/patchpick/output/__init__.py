"""Terminal output and interactive prompts."""
