"""Shared data model primitives."""

from chainbench.data_model.base import CamelModel, StrictBaseModel
from chainbench.data_model.rounding import round_half_up
from chainbench.data_model.timestamps import iso_timestamp, safe_timestamp, utc_now


__all__ = [
    "CamelModel",
    "StrictBaseModel",
    "iso_timestamp",
    "round_half_up",
    "safe_timestamp",
    "utc_now",
]
