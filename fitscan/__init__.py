"""FitScan - guided body scan capture and AI virtual try-on."""

__version__ = "0.1.0"
