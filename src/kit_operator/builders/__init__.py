"""Builders translating CRD specs into cloud configurations."""

from .autoscaling_group import create_asg_config_from_spec

__all__ = ["create_asg_config_from_spec"]
