"""Resilient AWS Clients — ECS and Secrets Manager wrappers with classified retry.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: callers import from resilient_aws.infrastructure / resilient_aws.core explicitly
"""
