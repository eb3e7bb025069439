# Services package init
"""
PetSitter Connect Backend — Services Layer
===========================================

Business rules between the routes (HTTP) and the store (persistence).

Service Inventory:
    - ListingService:     listing creation date rules, filtered queries
    - ApplicationService: apply, status changes, accept → reject-siblings cascade

Services are stateless singletons; every method takes the PetSitterStore
to operate on as its first argument, so tests pass an AsyncMock instead.
"""
