# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/i2cm/master/dv/__init__.py

"""I2C master verification bench.

Run it with the CLI:

    i2c-run --strategy=count --seq-len=4

or from Python:

    asyncio.run(I2cMasterTest("test", I2cMasterBenchConfig()).run())

Settings (env var or plusarg, optionally prefixed with I2CM_):
    I2C_STRATEGY, I2C_SEQ_LEN, I2C_ITERATIONS, I2C_RANDOM_ITERATIONS,
    I2C_MAILBOX_DEPTH, I2C_RESET_CYCLES, I2C_SEED, I2C_MAX_TICKS
"""
