# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/tools/__init__.py

"""i2cm command-line tools.

Command-line tools:
- i2c-run: Run the I2C master bench once and write its manifest
"""
