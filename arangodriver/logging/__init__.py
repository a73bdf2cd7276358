"""Logging setup for applications and the command line tool."""

from .logging import LogManager

__all__ = ['LogManager']
