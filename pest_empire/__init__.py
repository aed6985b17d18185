from .engine import PestControlGame

__all__ = ['PestControlGame']
