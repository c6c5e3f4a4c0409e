"""
Maternal health tracker: self-measured pregnancy observations and progress.

Start with maternal_svc.main.create_dashboard().
"""

__version__ = "0.1.0"
