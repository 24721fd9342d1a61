"""Component lint engine: binding extraction, rules and diagnostics."""
