"""
Error types raised while slicing sprite sheets
Every error is local to one description or image
"""

from typing import Iterable, Optional, Tuple


class SheetSliceError(Exception):
    """Base class for all slicing errors"""

    def __init__(self, message: str, description_id: Optional[str] = None):
        self.description_id = description_id
        if description_id:
            message = f"{message} (data file: {description_id})"
        super().__init__(message)


class ConfigurationError(SheetSliceError):
    """Malformed description or unusable slicing settings"""


class RoleCardinalityError(SheetSliceError):
    """Wrong number of materials for a role"""

    def __init__(self, description_id: str, role: str, count: int, expected: str):
        self.role = role
        self.count = count
        self.expected = expected
        super().__init__(
            f"There should be {expected} {role} material; found {count}",
            description_id,
        )


class AmbiguityError(SheetSliceError):
    """Several descriptions claim the same image"""

    def __init__(self, image_file: str, matching_ids: Iterable[str]):
        self.image_file = image_file
        self.matching_ids: Tuple[str, ...] = tuple(matching_ids)
        super().__init__(
            f"Found multiple data files referencing image {image_file}: "
            + ", ".join(self.matching_ids)
        )


class OutOfRangeError(SheetSliceError):
    """A description references frames or pixels the sheet does not have"""

    def __init__(self, message: str, description_id: Optional[str] = None,
                 index: Optional[int] = None, limit: Optional[int] = None):
        self.index = index
        self.limit = limit
        super().__init__(message, description_id)
