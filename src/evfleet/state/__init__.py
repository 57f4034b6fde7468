"""State/store layer.

The vehicle store is the single owner of the fleet. The simulation
driver writes to it; filters, sorting, statistics and alerts are all
re-derived from its snapshots whenever it announces a change.
"""
