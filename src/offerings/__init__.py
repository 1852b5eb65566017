"""Offerings — публикация размещений и списки для отображения."""

from .catalog import OfferingCatalog

__all__ = ["OfferingCatalog"]
