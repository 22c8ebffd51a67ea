# Routes package init
"""
United Pets Backend — API Routes Package
=========================================

What:  HTTP route handlers, one module per resource.

Route Inventory:
    - health.py:            GET /, GET /health
    - users.py:             /users, /users/me, /users/role/{email}, /users/{id}/role
    - pets.py:              /pets, /pets/latest, /pets/similar, /pets/{id}[/adopt]
    - adoption_requests.py: /adoptionRequest[/owner|/mine|/{id}]
    - donations.py:         /donations[...], /donate/{id}, /donation/{id}/refund,
                            /user-donation
    - payments.py:          POST /create-payment-intent
    - mail.py:              POST /send-mail

Routes stay thin: read the request, resolve the caller through
dependencies.py, call a service, shape the response.
"""
