# teamctl/__init__.py

__all__ = ['core', 'cli']

__version__ = 'v0.1.0'
