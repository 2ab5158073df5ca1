"""
Test suite for the staking ledger

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/scenarios/     : End-to-end deployment scenarios (USD/EGP)
"""
