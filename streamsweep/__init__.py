"""
Streamsweep - find and delete Lightstep streams with no recent activity.

This package provides a resumable, batch-oriented sweeper that classifies
streams by recent activity and deletes the inactive ones, keeping its
progress in a JSON checkpoint so an interrupted run can be picked up later.
"""

__version__ = "0.1.0"
