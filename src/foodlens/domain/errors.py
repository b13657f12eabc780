"""Domain error types."""


class FoodLensError(Exception):
    """Base class for FoodLens errors."""


class InvalidMeasurement(FoodLensError, ValueError):
    """Weight or height is absent, zero, negative or in an unknown unit."""


class InvalidFoodData(FoodLensError, ValueError):
    """Health score out of range or a negative macro."""


class StoreUnavailable(FoodLensError):
    """The external document store failed to read or write."""


class VisionUnavailable(FoodLensError):
    """The classification collaborator failed or returned unusable output."""
