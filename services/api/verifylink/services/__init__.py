"""Verification core services.

Services contain all business logic and are called by routes.
Services accept their collaborators (repositories, gateways, settings) explicitly
and never read request or session state on their own.
"""
