"""
Types and configuration schema shared by the layout runtime and its tests.
"""

from .activity_id import ActivityId, ActivityIdError, ActivityMetadata, ActivityMode  # noqa: F401
from .layout_schema import LayoutValidationError, load_and_validate_layout  # noqa: F401
