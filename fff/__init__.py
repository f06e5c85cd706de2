"""fff: request URLs provided on stdin fairly fast and keep the interesting responses."""

__version__ = "1.0.0"
