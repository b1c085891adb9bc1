"""
User API — Routes Package
===========================

Route Inventory:
    - users.py:   /users CRUD endpoints
    - health.py:  GET /health (liveness), GET /health/ready (readiness)

Routes stay thin: parse the request, make one repository call, pick the
status code. All SQL lives in userapi.repositories.
"""
