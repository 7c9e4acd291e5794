"""Shared type aliases."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Union

# Target of a conversion: a class or a dotted import path to one
TargetType = Union[type, str]

ConstraintCheck = Callable[[Any], bool]
