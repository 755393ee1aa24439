"""Verification clients for bernard.

Classes:
    :class:`VerificationClient` -- the abstract contract used by the orchestrator.
    :class:`HttpVerificationClient` -- implementation backed by :class:`httpx.AsyncClient`.
"""

from bernard.client.verification import HttpVerificationClient, VerificationClient

__all__ = ["HttpVerificationClient", "VerificationClient"]
