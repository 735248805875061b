"""Infrastructure Layer — boto3-backed clients, retry loop, logging setup.

Invariants:
    - Infrastructure never re-implements classification; it asks core/
    - All remote calls go through RetryExecutor
"""
