"""
Scheduling Domain

Pure rules shared by group events and one-on-one personal dining:

- time_slots.py  Time-of-day classification and the matching query predicate
- conflicts.py   Buffered overlap detection between accepted engagements
- lifecycle.py   Personal dining status transitions, lazy expiry, completion split
- ledger.py      Event slot accounting and join-request arbitration

Nothing here talks to the database; services load records, call these
functions, and persist the result.
"""
