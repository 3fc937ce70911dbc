"""Helpers that import nothing from the rest of `defarg`."""

from . import txt, err
