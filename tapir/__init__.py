"""
Tapir Live Activities - lock screen and Dynamic Island coordination for the
TapirTwins dream journal.

This package keeps two kinds of externally rendered activities alive:

- A scheduled dream-recording reminder
- An ambient companion presence with rotating signatures

It provides the coordinators, the activity host interface, and the event,
clock and configuration layers they rely on.
"""

__version__ = "1.0.0"
