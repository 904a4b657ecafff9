"""Core protocol logic: domain model, ports, request/response handling."""
