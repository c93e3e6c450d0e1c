__version__ = "budelb@0.1.0"
