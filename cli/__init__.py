"""CLI package for Book Assembly"""
from .main import cli

__all__ = ['cli']
