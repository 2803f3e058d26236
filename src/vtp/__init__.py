"""Video Transcode Planner.

Plans ffmpeg transcodes for a streaming platform with strict container and
codec rules, writes publishing manifests, and runs jobs from a serial queue.
"""

__version__ = "0.4.0"
