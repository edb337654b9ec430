"""sphidewin

Hide (unmap) X11 windows of a given WM_CLASS.

This package provides a long-running daemon that:
- Subscribes to structure notifications on the X root window
- Unmaps every newly mapped window whose WM_CLASS contains the target class
- Optionally hides matching windows that were mapped before it started
- Maps every window it hid again when it is interrupted or the X stream ends
"""

__version__ = "1.0.0"
__author__ = "sphidewin contributors"
