# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Process exit codes. A release pipeline treats anything non-zero as failure;
the distinct values only tell a human where to look.
"""

SUCCESS: int = 0
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
PACKAGING_ERROR: int = 3
VALIDATION_ERROR: int = 4
