"""Exceptions raised by the tnacent package."""

import numpy as np


class TNAError(Exception):
    """Base class for tnacent errors"""
    pass


class ValidationError(TNAError, ValueError):
    """Invalid argument: bad measure name, flag, cluster or matrix shape"""
    pass


class NumericError(TNAError, np.linalg.LinAlgError):
    """A matrix computation failed (e.g. a singular system)"""
    pass
