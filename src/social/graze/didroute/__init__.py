"""
didroute - DID Resolution with Identity Continuity

This package resolves decentralized identifiers (DIDs) across several DID
methods and follows identity continuity redirects: when a controller
deactivates a DID and names a successor in ``alsoKnownAs``, resolution moves
on to the successor, provided the successor names the deactivated DID back.

Key Components:
- resolve: Method resolvers, method dispatch and the redirect-chasing resolver
- ledger: Ledger pool reads and DID document synthesis for ledger DIDs
- model: DID document and resolution result models
- app: HTTP service exposing resolution, configuration

Architecture Overview:
1. Method Resolution:
   - did:key documents derived from the key itself
   - did:web documents fetched from the hosting domain
   - did:plc documents fetched from a PLC directory
   - did:sov documents synthesized from raw ledger records

2. Deactivation:
   - Ledger DIDs are deactivated by rotating to a well-known dead verkey
   - Hosted documents carry an embedded ``deactivated`` flag

3. Redirect Chasing:
   - Deactivated documents redirect to their first ``alsoKnownAs`` entry
   - Successors must list their predecessor in ``alsoKnownAs``
   - Chains are bounded and loops are rejected
"""
