# Routes package init
"""
PetSitter Connect Backend — API Routes Package
===============================================

Route Inventory:
    - listings.py:      POST /listings
                        GET  /listings                       (filtered)
                        GET  /listings/owner/{ownerId}
                        GET  /listings/{id}
                        GET  /listings/{id}/with-applications
    - applications.py:  POST  /listings/{id}/applications
                        GET   /listings/{id}/applications
                        PATCH /applications/{id}
                        GET   /sitters/{sitterId}/applications
    - health.py:        GET  /health

Routes stay THIN: bind the request, call a service, shape the response.
"""
