"""
collabhive: collaboration-matching backend.

Profiles publish projects and negotiate collaboration relationships
(creator, pending / accepted / declined collaborator) with other profiles.
The service layer in ``collabhive.services`` owns the relationship state
machine, the project search cache and the derived read-models; the FastAPI
routers in ``collabhive.api`` are thin glue over it.
"""
