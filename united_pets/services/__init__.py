# Services package init
"""
United Pets Backend — Services Layer
=====================================

What:  Business rules between the routes (HTTP) and the database (persistence).
How:   Stateless service singletons take an AsyncSession plus the verified
       Identity and return ORM objects; routes turn those into schemas.

Service Inventory:
    - AuthorizationService: admin and owner-or-admin decisions
    - UserService:          registration, roles
    - PetService:           pet listing and owner-gated mutations
    - AdoptionService:      adoption requests and decisions
    - DonationService:      campaigns, donate, refund, donation history
    - Adapters (adapter_base.py): identity, payment and mail interfaces with
      Firebase, Stripe and SMTP implementations
"""
