"""citesync - citation state synchronization engine.

Binds document citation slots to processor-assigned citation identities,
talks to an external citation processor, and reconciles in-memory state
with the citation data persisted alongside a document.

Packages:
- core: configuration, logging, exceptions, constants
- schemas: citation and processor wire models
- storage: persisted citation records keyed by document identity
- document: host document capability and node filtering
- clients: citation processor protocol and clients
- citations: reconciler, renderer and session wiring
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
