"""
opsctl - submit validated maintenance operations (restart, upgrade, scaling,
volume expansion, reconfiguration) to a database cluster control plane.
"""

__version__ = "0.1.0"
