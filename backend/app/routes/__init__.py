# Routes package init
"""
Chirper Backend: API Routes Package
===================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - accounts.py:  POST /register, POST /login
    - messages.py:  /messages CRUD, GET /accounts/{account_id}/messages
    - health.py:    GET  /health

Design Principle:
    Routes are thin: parse the request, call one service, shape the response.
    Rules live in the services.
"""
