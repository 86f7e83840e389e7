"""
SenseFlow - Source Package

A small banking screen: one in-memory account that the user moves money
in and out of with on-screen buttons or spoken commands.

DESIGN PRINCIPLES:
1. The balance changes only through deposit and withdraw
2. Every attempt leaves a visible outcome, including rejected ones
3. Unrecognized commands never touch the account
4. Every user action is audited
"""

__version__ = "1.0.0"
__author__ = "SenseFlow Team"
