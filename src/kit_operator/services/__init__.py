"""Adapters for the cloud provider and the object store."""
