"""
Forge analytics: pure functions over a (habits, logs, now) snapshot.

Nothing in this package touches the database; the store hands over plain
habit and log objects and every result is computed fresh on each call.
"""
