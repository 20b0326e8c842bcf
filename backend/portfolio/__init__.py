"""Portfolio backend: content API, admin tooling and diagnostics."""
