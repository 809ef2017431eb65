# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/shared/__init__.py

"""Shared components and utilities for the i2cm bench.

Subpackages:
- dv: Shared design verification infrastructure (base classes, utilities)
"""
