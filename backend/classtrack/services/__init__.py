"""Service Layer — orchestrates pure core logic around repository IO.

Invariants:
    - Services talk to stores only through core/repository_protocols.py
    - No service retries a conflicting write
"""
