"""wtime: a single-user work time log.

Key components
--------------
Stamp            One timestamped check-in or check-out
SqlLedger        Durable ordered stamp storage (SQLite via SQLAlchemy)
SessionMachine   Guards check-in / check-out alternation
Aggregator       Sums closed sessions since an instant
SummaryReporter  Day and week totals
WorkLog          Owns the store handle and wires the above together
"""
