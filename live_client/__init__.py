"""
Real-time notification client.

Entry points:
- NotificationCenter: composition root used by applications and the CLI
- ConnectionManager: the transport session on its own
"""
