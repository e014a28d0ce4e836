"""
CampVerse notification and assistant service.

Structure:
- schemas/: Pydantic models for stored notifications and API payloads
- services/notifications/: audience targeting, read tracking, remote/local stores
- services/chatbot/: assistant chat sessions and offline answers
- routers/: FastAPI endpoints
- dependencies.py: service wiring and auth dependencies
"""
