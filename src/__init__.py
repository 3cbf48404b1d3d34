"""
Subscription Splitter - Source Package

Works out who owes what for the subscriptions a household shares:
per-head cost of each service, what every member has paid, and whether
they are in credit or overdue.

DESIGN PRINCIPLES:
1. Reports are recomputed from a fresh snapshot every time
2. Missing cross-references degrade to absence, never to a crash
3. Malformed records fail loudly, once, at ingestion
4. "Now" is always passed in explicitly
5. Data source is swappable
"""

__version__ = "1.0.0"
__author__ = "Subscription Splitter Team"
