"""ORM models."""

from lottostats.models.draw import Draw, DrawRecord

__all__ = ["Draw", "DrawRecord"]
