"""
Pennylog - Source Package

A personal finance tracker: income, expense and savings entries,
configurable categories and budgets, and period-scoped statistics.

DESIGN PRINCIPLES:
1. Statistics are pure functions of (data, settings, period, today)
2. Every mutation produces a new whole document
3. Storage layer is swappable
4. Every state change is logged
"""

__version__ = "1.0.0"
__author__ = "Pennylog Team"
