"""Core Layer — pure retry/classification logic, no IO, no async, no boto3.

Invariants:
    - No module in core/ imports from infrastructure/ or config
    - All functions are pure and deterministic (backoff jitter takes an injectable RNG)

Design Decisions:
    - Functional core separated from imperative shell: infrastructure/ performs the
      remote calls and sleeps, core/ decides what they mean
"""
