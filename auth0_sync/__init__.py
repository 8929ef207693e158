"""Declarative reconciliation of management API clients and client grants.

To reconcile resources:
    from auth0_sync.core.management import authenticate, ManagementClient, ApplicationClientReconciler

To load settings from the environment:
    from auth0_sync.config import load_settings
"""
