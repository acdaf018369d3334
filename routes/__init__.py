"""
===========================================================================
routes/__init__.py — Routes Package Initializer
===========================================================================

PURPOSE:
    Makes the "routes" folder a Python PACKAGE so main.py can do:
        from routes.query_routes import router

    Each module in here owns one APIRouter:
        location_routes      — locations & geocoding
        query_routes         — prompt processing & history
        conversation_routes  — session conversations
===========================================================================
"""
