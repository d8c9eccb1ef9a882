"""
Finance Manager - Core Package

In-memory core of a personal finance application: transaction and budget
stores, the aggregations views are drawn from, and the change notifications
that keep those views current.

DESIGN PRINCIPLES:
1. Stores own their data, views only re-query
2. Aggregations are computed live, never cached
3. One faulty listener never blocks the others
4. Advice requests never touch store state
"""

__version__ = "1.0.0"
__author__ = "Finance Manager Team"
