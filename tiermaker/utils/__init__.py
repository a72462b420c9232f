"""
Utils module - Shared utilities for TierMaker

This module provides common utilities used across the project:
- paths: Default file locations
- config: Settings from YAML, environment and CLI flags
- io_helpers: BOM-safe UTF-8 I/O and atomic writes
- logging_helper: Consistent logging setup
"""
