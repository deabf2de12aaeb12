"""
Company onboarding and transfer registry for a payments network.
"""

__version__ = "0.1.0"
