"""skinnyspec

Behavioral-testing macros for MVC web controllers. Example groups declare
what an action should find, assign, render or redirect to, and every
declaration becomes a pytest test backed by mock expectations.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
