"""
Test suite for Herdbook.

Test Organization:
- integration/ - API and cascade tests against the database
- unit/ - pagination, cache and import parsing building blocks
"""
