"""Core reconciliation logic.

Module Structure:
    - management/ : Management API client, resource models and reconcilers

Public APIs (auth0_sync.core.management):
    - authenticate(), Session, CredentialInput
    - exchange(), ManagementClient, ExchangeResult
    - ApplicationClientReconciler, AccessGrantReconciler
    - ManagementError and its subclasses
"""
