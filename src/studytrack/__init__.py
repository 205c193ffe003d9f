"""StudyTrack: study-tracking API for exam aspirants."""

__version__ = "0.1.0"
