"""
Core building blocks.

Components:
- models.py: User / Project / Member / Task / Session dataclasses and enums
- codec.py: JSON (de)serialization of the stored collections
- ports.py: Protocols the repositories depend on
- locks.py: per-storage-key locks for read-modify-write chains
- validation.py: email checks, required text, timestamps, id allocation
- state.py: AppState wiring
"""
