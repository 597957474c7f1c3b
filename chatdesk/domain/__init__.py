"""Domain layer - core business logic and interfaces.

This layer contains:
- Domain entities (chats, messages, users, companies, scheduled messages)
- Domain exceptions
- Storage and reply generator interfaces (Strategy Pattern)
"""
