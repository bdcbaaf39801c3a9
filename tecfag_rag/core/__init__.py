"""Core domain, ports and services (no infrastructure dependencies)."""
