"""
Real-time client components.

Organized into domain-specific modules:
- core/          - Constants and process-wide instances
- connection/    - Session state, transport, heartbeat
- events/        - Event names, payload models, router
- notifications/ - Notification ledger
- effects/       - Toasts, sound, desktop notifications
- resilience/    - Reconnection policy
- api/           - REST history client

Import from the specific submodules.
"""
