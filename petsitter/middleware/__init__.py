# Middleware package init
"""
PetSitter Connect Backend — Middleware Package
===============================================

Execution order for a request (outermost first):

    RateLimit → RequestID → RequestLogging → GZip → CORS → route

Starlette runs middleware in reverse order of registration, so main.py adds
them CORS first and RateLimit last.
"""
