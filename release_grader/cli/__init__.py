# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Release Grader CLI

Usage:
    grade-request setup --type functionality --release v1.0.0
    grade-request run
"""

from .main import cli, main

__all__ = ['cli', 'main']
