"""Webstore entities, persistence models and the snapshot entity store."""

from .snapshot import EntityStore

__all__ = ["EntityStore"]
