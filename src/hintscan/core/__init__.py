"""Core orchestration: configuration, bootstrap, reporting and telemetry."""
