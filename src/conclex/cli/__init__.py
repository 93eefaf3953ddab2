"""
Command-line interface entry points for conclex.

Entry points:
- conclex: Run the full concreteness analysis
"""
