"""SurvivalFox chat client core.

Conversation state, on-device history and the rag-answer gateway for the
SurvivalFox game-help assistant.
"""
