"""FrontDesk - scheduling, classes and reception check-in for a training school"""

__version__ = "1.0.0"
