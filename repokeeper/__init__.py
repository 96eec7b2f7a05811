"""Reconcile declared GitHub repositories with the GitHub REST API."""
