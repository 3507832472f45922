"""
Process discovery for launched capture commands.
"""

from camcorder.process.discovery import ProcessDiscovery

__all__ = ["ProcessDiscovery"]
