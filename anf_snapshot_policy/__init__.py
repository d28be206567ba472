"""Azure NetApp Files snapshot policy sample — provision, poll and clean up ANF resources."""

__version__ = "0.1.0"
