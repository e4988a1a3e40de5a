"""
Command-Line Interface

Entry point: ``monzosplitwise`` (see main.py).
"""
