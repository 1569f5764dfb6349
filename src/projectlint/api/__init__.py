"""REST API surface for projectlint."""
