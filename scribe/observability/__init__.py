"""Observability: structured logging and metrics.

Provides standardized observability primitives using structlog for logging
and Prometheus for metrics. The structured logger is also the diagnostic
channel for audit records that could not be delivered.
"""
