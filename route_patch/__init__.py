"""
route-patch generates the route list of a composite networking resource from a
directory of satellite route manifests.

Each file such as `login-route.yaml` becomes one entry (`/login` routed to
`app/login-route`) and the full, ordered list is written as a kustomize
Component that replaces the list field of the primary resource. Regenerating
from the same directory always produces the same bytes, and a file removed from
the directory disappears from the list on the next run.
"""

__all__ = [
    "assembler",
    "config",
    "deriver",
    "exceptions",
    "manifest",
    "orchestrator",
    "scanner",
    "serializer",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
