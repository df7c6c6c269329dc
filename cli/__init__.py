"""CLI package for BookFrame"""
from .main import cli

__all__ = ['cli']
