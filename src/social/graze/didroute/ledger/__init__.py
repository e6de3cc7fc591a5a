"""
Ledger Access

Read-side access to a distributed ledger for ledger-anchored DIDs.

Key Components:
- pool.py: Read requests, ledger pools and per-DID pool selection
- verkey.py: Full/abbreviated verkeys and the "dead" deactivation key
- services.py: DID document synthesis from the verkey and endpoint attribute

The ledger stores no DID document. Resolution state is derived from three
reads: the NYM record (verkey, role), the ``alsoKnownAs`` attribute and the
``endpoint`` attribute.
"""
