"""Telemetry simulation: sample generator and periodic driver.

The vehicle store imports the generator from here, so this package must
not import the driver (which itself depends on the store) at import time.
"""
