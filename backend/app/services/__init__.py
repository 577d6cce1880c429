# Services package init
"""
Chirper Backend: Services Layer
===============================

What:  Business rules sitting between routes (HTTP) and repositories (SQL).
How:   Services receive their repository at construction (see
       app.dependencies), apply validation rules, and return response
       schemas or raise application exceptions.

Service Inventory:
    - AccountService: registration, login, account existence
    - MessageService: message create/read/update/delete and listings
"""
