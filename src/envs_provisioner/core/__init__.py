"""Core infrastructure components for envs-provisioner."""

from envs_provisioner.core.platform import Platform

__all__ = ["Platform"]
