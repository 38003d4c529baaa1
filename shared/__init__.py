"""
Shared Kernel

Building blocks reused by every hotel context: value objects, domain
errors, the unit of work, the message bus and the repository base.
"""
