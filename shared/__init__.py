"""
Shared Kernel

Base classes and utilities shared by the parking and booking contexts:
domain building blocks, the error taxonomy, the unit of work that scopes
every ledger operation, and the message bus.
"""
